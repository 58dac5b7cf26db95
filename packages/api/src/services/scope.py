# This project was developed with assistance from AI tools.
"""Shared data scope filtering for service queries.

Centralizes the DataScope -> SQL WHERE logic so that every service that
loads an Application applies the same rules. Child entities (history,
requirements, ledger rows, signatures) are only ever reached through an
Application that already passed this filter.
"""

from db import Application, Listing
from sqlalchemy import false

from ..schemas.auth import DataScope, UserContext


def apply_data_scope(stmt, scope: DataScope, user: UserContext):
    """Apply data scope filtering to a select over Application.

    Args:
        stmt: A SQLAlchemy select statement whose FROM includes Application.
        scope: The caller's DataScope.
        user: The caller's UserContext.

    Returns:
        The filtered statement. A scope with no grants matches nothing.
    """
    if scope.all_applications:
        return stmt
    if scope.own_data_only and scope.user_id:
        return stmt.where(Application.applicant_user_id == scope.user_id)
    if scope.listing_owner:
        return stmt.join(Listing, Listing.id == Application.listing_id).where(
            Listing.owner_id == scope.listing_owner
        )
    if scope.listing_agent:
        return stmt.join(Listing, Listing.id == Application.listing_id).where(
            Listing.agent_id == scope.listing_agent
        )
    return stmt.where(false())
