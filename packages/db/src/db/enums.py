# This project was developed with assistance from AI tools.
"""
Domain enums for the rental application lifecycle.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (api package).
"""

import enum


class ApplicationStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING_PAYMENT = "pending_payment"
    PAYMENT_VERIFIED = "payment_verified"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    INFO_REQUESTED = "info_requested"
    CONDITIONAL_APPROVAL = "conditional_approval"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
    EXPIRED = "expired"

    @classmethod
    def terminal_statuses(cls) -> frozenset["ApplicationStatus"]:
        """Statuses where an application is no longer active."""
        return frozenset({cls.APPROVED, cls.REJECTED, cls.WITHDRAWN, cls.EXPIRED})


class UserRole(str, enum.Enum):
    APPLICANT = "applicant"
    LANDLORD = "landlord"
    PROPERTY_MANAGER = "property_manager"
    AGENT = "agent"
    ADMIN = "admin"
    SYSTEM = "system"

    @classmethod
    def reviewer_roles(cls) -> frozenset["UserRole"]:
        """Roles allowed to review, score, and decide on applications."""
        return frozenset({cls.LANDLORD, cls.PROPERTY_MANAGER, cls.AGENT, cls.ADMIN})


class RejectionCategory(str, enum.Enum):
    INCOME_INSUFFICIENT = "income_insufficient"
    CREDIT_ISSUES = "credit_issues"
    BACKGROUND_CHECK_FAILED = "background_check_failed"
    RENTAL_HISTORY_ISSUES = "rental_history_issues"
    INCOMPLETE_APPLICATION = "incomplete_application"
    MISSING_DOCUMENTS = "missing_documents"
    VERIFICATION_FAILED = "verification_failed"
    OTHER = "other"


class RequirementType(str, enum.Enum):
    DOCUMENT = "document"
    INFORMATION = "information"
    VERIFICATION = "verification"


class PaymentAttemptStatus(str, enum.Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    MANUALLY_VERIFIED = "manually_verified"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CHECK = "check"
    BANK_TRANSFER = "bank_transfer"
    WIRE_TRANSFER = "wire_transfer"
    MONEY_ORDER = "money_order"
    OTHER = "other"


class LeaseSignatureStatus(str, enum.Enum):
    UNSIGNED = "unsigned"
    PARTIALLY_SIGNED = "partially_signed"
    SIGNED = "signed"


class SignerRole(str, enum.Enum):
    TENANT = "tenant"
    LANDLORD = "landlord"


class CreditTier(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class EmploymentStatus(str, enum.Enum):
    EMPLOYED = "employed"
    SELF_EMPLOYED = "self_employed"
    RETIRED = "retired"
    STUDENT = "student"
    UNEMPLOYED = "unemployed"
