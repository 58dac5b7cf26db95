# This project was developed with assistance from AI tools.
"""Pure auth utility functions with no FastAPI or HTTP dependencies.

These are used by the middleware layer (HTTP request auth) and by
background callers such as the expiry sweep, which act as the system
role without a request.
"""

from db.enums import UserRole

from ..schemas.auth import DataScope, UserContext

SYSTEM_USER_ID = "system"


def build_data_scope(role: UserRole, user_id: str) -> DataScope:
    """Build data scope rules based on the user's role."""
    if role == UserRole.APPLICANT:
        return DataScope(own_data_only=True, user_id=user_id)
    if role in (UserRole.LANDLORD, UserRole.PROPERTY_MANAGER):
        return DataScope(listing_owner=user_id)
    if role == UserRole.AGENT:
        return DataScope(listing_agent=user_id)
    if role in (UserRole.ADMIN, UserRole.SYSTEM):
        return DataScope(all_applications=True)
    return DataScope()


def system_user() -> UserContext:
    """Actor used for automatic transitions (payment follow-on, expiry)."""
    return UserContext(
        user_id=SYSTEM_USER_ID,
        role=UserRole.SYSTEM,
        email="",
        name="System",
        data_scope=DataScope(all_applications=True),
    )
