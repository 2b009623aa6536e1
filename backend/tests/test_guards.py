"""
Setups API - Record Guard Unit Tests
======================================

Tests handle_not_found and require_ownership on transient ORM objects
(no database needed).
"""

import uuid

import pytest

from setups_api.exceptions import ForbiddenError, NotFoundError
from setups_api.models.setup import Setup
from setups_api.models.user import User
from setups_api.services.guards import handle_not_found, require_ownership


def _user() -> User:
    return User(id=uuid.uuid4(), email=f"{uuid.uuid4().hex[:6]}@example.com")


class TestHandleNotFound:

    def test_returns_record_unchanged(self):
        setup = Setup(id=uuid.uuid4(), owner="someone", document={"title": "t"})
        assert handle_not_found(setup) is setup

    def test_none_raises_not_found(self):
        with pytest.raises(NotFoundError) as exc_info:
            handle_not_found(None, resource="setup", resource_id="abc")
        assert exc_info.value.context["resource_id"] == "abc"
        assert "abc" in exc_info.value.message

    def test_falsy_record_is_not_missing(self):
        # Only None means "absent"
        assert handle_not_found([]) == []


class TestRequireOwnership:

    def test_owner_passes(self):
        user = _user()
        setup = Setup(id=uuid.uuid4(), owner=str(user.id), document={})
        assert require_ownership(user, setup) is None

    def test_other_user_forbidden(self):
        owner, other = _user(), _user()
        setup = Setup(id=uuid.uuid4(), owner=str(owner.id), document={})
        with pytest.raises(ForbiddenError):
            require_ownership(other, setup)

    def test_missing_record_reports_not_found_first(self):
        user = _user()
        with pytest.raises(NotFoundError):
            require_ownership(user, handle_not_found(None))
