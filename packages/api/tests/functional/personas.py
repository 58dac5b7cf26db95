# This project was developed with assistance from AI tools.
"""Persona factories for tests.

Each function returns a UserContext matching the DataScope built by
``core/auth.py:build_data_scope()`` for that role. Fixed user IDs
ensure cross-test consistency.
"""

from db.enums import UserRole

from src.core.auth import build_data_scope
from src.schemas.auth import UserContext

# Fixed IDs for cross-test referencing
ALICE_USER_ID = "alice-nguyen-001"
BOB_USER_ID = "bob-okafor-002"
LANDLORD_USER_ID = "dana-reyes-landlord"
OTHER_LANDLORD_USER_ID = "sam-kowalski-landlord"
MANAGER_USER_ID = "priya-shah-pm"
AGENT_USER_ID = "marco-diaz-agent"
ADMIN_USER_ID = "admin-user"


def _persona(user_id: str, role: UserRole, email: str, name: str) -> UserContext:
    return UserContext(
        user_id=user_id,
        role=role,
        email=email,
        name=name,
        data_scope=build_data_scope(role, user_id),
    )


def applicant_alice() -> UserContext:
    return _persona(ALICE_USER_ID, UserRole.APPLICANT, "alice@example.com", "Alice Nguyen")


def applicant_bob() -> UserContext:
    return _persona(BOB_USER_ID, UserRole.APPLICANT, "bob@example.com", "Bob Okafor")


def landlord() -> UserContext:
    return _persona(LANDLORD_USER_ID, UserRole.LANDLORD, "dana@leasedesk.example", "Dana Reyes")


def other_landlord() -> UserContext:
    return _persona(OTHER_LANDLORD_USER_ID, UserRole.LANDLORD, "sam@leasedesk.example", "Sam Kowalski")


def property_manager() -> UserContext:
    return _persona(MANAGER_USER_ID, UserRole.PROPERTY_MANAGER, "priya@leasedesk.example", "Priya Shah")


def agent() -> UserContext:
    return _persona(AGENT_USER_ID, UserRole.AGENT, "marco@leasedesk.example", "Marco Diaz")


def admin() -> UserContext:
    return _persona(ADMIN_USER_ID, UserRole.ADMIN, "admin@leasedesk.example", "Admin User")
