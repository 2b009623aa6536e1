"""
Setups API - Record Guards
============================

Two checks every by-id handler runs, in this order:

    handle_not_found   → 404 if the lookup returned nothing
    require_ownership  → 403 if the caller is not the record's owner

Running them in that order means a missing record never reports a
permission error.
"""

import logging
from typing import Optional, TypeVar

from setups_api.exceptions import ForbiddenError, NotFoundError
from setups_api.models.setup import Setup
from setups_api.models.user import User

logger = logging.getLogger(__name__)

T = TypeVar("T")


def handle_not_found(
    record: Optional[T],
    resource: str = "setup",
    resource_id: Optional[str] = None,
) -> T:
    """Pass `record` through, or raise NotFoundError when it is None."""
    if record is None:
        raise NotFoundError(resource=resource, resource_id=resource_id)
    return record


def require_ownership(user: User, record: Setup) -> None:
    """Raise ForbiddenError unless `user` created `record`."""
    if record.owner != str(user.id):
        logger.warning(
            "Ownership check failed: user %s on setup %s (owner %s)",
            user.id,
            record.id,
            record.owner,
        )
        raise ForbiddenError(context={"setup_id": str(record.id)})
