"""
Setups API - Services Layer
=============================

What:  Business logic between routes (HTTP) and database (persistence).

Service Inventory:
    - SetupService: CRUD over setups with not-found / ownership gates
    - AuthService:  bearer token → User lookup
    - guards:       handle_not_found, require_ownership
    - sanitizer:    remove_blank_fields for update payloads

Services can be unit-tested without HTTP: they take an AsyncSession and
plain values, and report failures by raising setups_api.exceptions types.
"""
