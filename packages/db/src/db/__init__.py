# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, get_db, get_db_service
from .enums import (
    ApplicationStatus,
    CreditTier,
    EmploymentStatus,
    LeaseSignatureStatus,
    PaymentAttemptStatus,
    PaymentMethod,
    PaymentStatus,
    RejectionCategory,
    RequirementType,
    SignerRole,
    UserRole,
)
from .models import (
    Application,
    ApplicationComment,
    AuditEvent,
    ConditionalRequirement,
    LeaseSignature,
    LeaseSigningDraft,
    Listing,
    PaymentAttempt,
    PaymentVerification,
    StatusHistoryEntry,
)

__all__ = [
    "Base",
    "DatabaseService",
    "get_db",
    "get_db_service",
    "__version__",
    # Enums
    "ApplicationStatus",
    "UserRole",
    "RequirementType",
    "RejectionCategory",
    "PaymentAttemptStatus",
    "PaymentStatus",
    "PaymentMethod",
    "LeaseSignatureStatus",
    "SignerRole",
    "CreditTier",
    "EmploymentStatus",
    # Models
    "Application",
    "ApplicationComment",
    "AuditEvent",
    "ConditionalRequirement",
    "LeaseSignature",
    "LeaseSigningDraft",
    "Listing",
    "PaymentAttempt",
    "PaymentVerification",
    "StatusHistoryEntry",
]
