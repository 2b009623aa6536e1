# Models package init
# Importing the models registers them on Base.metadata (Alembic, test setup).
from setups_api.models.setup import Setup
from setups_api.models.user import User

__all__ = ["Setup", "User"]
