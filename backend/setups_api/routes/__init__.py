"""
Setups API - API Routes Package
=================================

Route Inventory:
    - setups.py:  GET/POST /setups, GET/PATCH/DELETE /setups/{id}
    - health.py:  GET /health (service health check)

Routes are thin: extract data from the request, call a service, pick the
status code. Business rules live in services.
"""
