# This project was developed with assistance from AI tools.
"""
LeaseDesk -- domain models

Rental application lifecycle models covering listings, applications,
status history, conditional requirements, the payment ledger, review
comments, lease signatures, and the audit trail.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import (
    ApplicationStatus,
    LeaseSignatureStatus,
    PaymentAttemptStatus,
    PaymentMethod,
    PaymentStatus,
    RejectionCategory,
    RequirementType,
    SignerRole,
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Listing(Base):
    """Rental listing. Read-only from the lifecycle's point of view."""

    __tablename__ = "listings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(255), nullable=False, index=True)
    agent_id = Column(String(255), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    state_code = Column(String(8), nullable=True)
    monthly_rent = Column(Numeric(10, 2), nullable=True)
    application_fee = Column(Numeric(10, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow, nullable=False,
    )

    applications = relationship("Application", back_populates="listing")

    def __repr__(self):
        return f"<Listing(id={self.id}, title='{self.title}')>"


class Application(Base):
    """Rental application -- the aggregate root of the lifecycle."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("applicant_user_id", "listing_id", name="uq_applications_applicant_listing"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    applicant_user_id = Column(String(255), nullable=False, index=True)
    listing_id = Column(Integer, ForeignKey("listings.id"), nullable=False, index=True)
    status = Column(
        Enum(ApplicationStatus, name="application_status", native_enum=False),
        nullable=False,
        default=ApplicationStatus.DRAFT,
    )
    previous_status = Column(
        Enum(ApplicationStatus, name="application_status", native_enum=False),
        nullable=True,
    )
    version = Column(Integer, nullable=False)

    # Applicant-supplied form sections
    personal_info = Column(JSON, nullable=True)
    employment = Column(JSON, nullable=True)
    rental_history = Column(JSON, nullable=True)
    co_applicants = Column(JSON, nullable=True)
    document_status = Column(JSON, nullable=True)

    # Listing terms captured at creation
    monthly_rent = Column(Numeric(10, 2), nullable=True)
    application_fee = Column(Numeric(10, 2), nullable=True)
    state_code = Column(String(8), nullable=True)

    # Point-in-time score snapshot
    score = Column(Integer, nullable=True)
    score_breakdown = Column(JSON, nullable=True)
    scored_at = Column(DateTime(timezone=True), nullable=True)
    scored_by = Column(String(255), nullable=True)

    payment_status = Column(
        Enum(PaymentStatus, name="payment_status", native_enum=False),
        nullable=False,
        default=PaymentStatus.UNPAID,
    )
    reviewed_by = Column(String(255), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    rejection_category = Column(
        Enum(RejectionCategory, name="rejection_category", native_enum=False),
        nullable=True,
    )
    rejection_reason = Column(Text, nullable=True)
    rejection_appealable = Column(Boolean, nullable=True)
    conditional_due_date = Column(DateTime(timezone=True), nullable=True)
    lease_signature_status = Column(
        Enum(LeaseSignatureStatus, name="lease_signature_status", native_enum=False),
        nullable=True,
    )
    lease_fully_signed_at = Column(DateTime(timezone=True), nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow, nullable=False,
    )

    # Every flush of this row bumps ``version``; a concurrent writer that
    # read the old value fails with StaleDataError.
    __mapper_args__ = {"version_id_col": version}

    listing = relationship("Listing", back_populates="applications")
    status_history = relationship(
        "StatusHistoryEntry", back_populates="application", cascade="all, delete-orphan",
    )
    requirements = relationship(
        "ConditionalRequirement", back_populates="application", cascade="all, delete-orphan",
    )
    payment_attempts = relationship(
        "PaymentAttempt", back_populates="application", cascade="all, delete-orphan",
    )
    payment_verifications = relationship(
        "PaymentVerification", back_populates="application", cascade="all, delete-orphan",
    )
    comments = relationship(
        "ApplicationComment", back_populates="application", cascade="all, delete-orphan",
    )
    lease_signatures = relationship(
        "LeaseSignature", back_populates="application", cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Application(id={self.id}, status='{self.status}')>"


class StatusHistoryEntry(Base):
    """One row per successful status transition. Never updated."""

    __tablename__ = "status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id"), nullable=False, index=True)
    status = Column(
        Enum(ApplicationStatus, name="application_status", native_enum=False),
        nullable=False,
    )
    previous_status = Column(
        Enum(ApplicationStatus, name="application_status", native_enum=False),
        nullable=True,
    )
    changed_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    changed_by = Column(String(255), nullable=False)
    changed_by_role = Column(String(50), nullable=True)
    reason = Column(Text, nullable=True)

    application = relationship("Application", back_populates="status_history")

    def __repr__(self):
        return f"<StatusHistoryEntry(id={self.id}, status='{self.status}')>"


class ConditionalRequirement(Base):
    """Outstanding item attached to a conditional approval."""

    __tablename__ = "conditional_requirements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    requirement_type = Column(
        Enum(RequirementType, name="requirement_type", native_enum=False),
        nullable=False,
        default=RequirementType.INFORMATION,
    )
    description = Column(Text, nullable=False)
    required = Column(Boolean, nullable=False, default=True)
    satisfied = Column(Boolean, nullable=False, default=False)
    satisfied_at = Column(DateTime(timezone=True), nullable=True)
    satisfied_by = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)

    application = relationship("Application", back_populates="requirements")

    def __repr__(self):
        return f"<ConditionalRequirement(id={self.id}, satisfied={self.satisfied})>"


class PaymentAttempt(Base):
    """Automated payment attempt. Append-only."""

    __tablename__ = "payment_attempts"
    __table_args__ = (
        UniqueConstraint("application_id", "reference_id", name="uq_payment_attempts_app_reference"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id"), nullable=False, index=True)
    reference_id = Column(String(100), nullable=False)
    status = Column(
        Enum(PaymentAttemptStatus, name="payment_attempt_status", native_enum=False),
        nullable=False,
    )
    amount = Column(Numeric(10, 2), nullable=False)
    error_message = Column(Text, nullable=True)
    recorded_by = Column(String(255), nullable=True)
    attempted_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)

    application = relationship("Application", back_populates="payment_attempts")

    def __repr__(self):
        return f"<PaymentAttempt(id={self.id}, reference='{self.reference_id}', status='{self.status}')>"


class PaymentVerification(Base):
    """Reviewer-entered manual payment verification. Append-only."""

    __tablename__ = "payment_verifications"
    __table_args__ = (
        UniqueConstraint("application_id", "reference_id", name="uq_payment_verifications_app_reference"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id"), nullable=False, index=True)
    reference_id = Column(String(100), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(
        Enum(PaymentMethod, name="payment_method", native_enum=False),
        nullable=False,
    )
    received_at = Column(DateTime(timezone=True), nullable=False)
    verified_by = Column(String(255), nullable=False)
    verified_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    internal_note = Column(Text, nullable=True)
    confirmation_checked = Column(Boolean, nullable=False, default=False)

    application = relationship("Application", back_populates="payment_verifications")

    def __repr__(self):
        return f"<PaymentVerification(id={self.id}, reference='{self.reference_id}')>"


class ApplicationComment(Base):
    """Reviewer comment on an application."""

    __tablename__ = "application_comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id"), nullable=False, index=True)
    author_id = Column(String(255), nullable=False)
    author_role = Column(String(50), nullable=True)
    body = Column(Text, nullable=False)
    is_internal = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)

    application = relationship("Application", back_populates="comments")

    def __repr__(self):
        return f"<ApplicationComment(id={self.id}, internal={self.is_internal})>"


class LeaseSignature(Base):
    """One party's lease signature. Never overwritten."""

    __tablename__ = "lease_signatures"
    __table_args__ = (
        UniqueConstraint("application_id", "signer_role", name="uq_lease_signatures_app_role"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id"), nullable=False, index=True)
    signer_role = Column(
        Enum(SignerRole, name="signer_role", native_enum=False),
        nullable=False,
    )
    signer_user_id = Column(String(255), nullable=False)
    signer_name = Column(String(255), nullable=False)
    signature_data = Column(Text, nullable=False)
    acknowledgments = Column(JSON, nullable=False)
    disclosure_ids = Column(JSON, nullable=True)
    state_code = Column(String(8), nullable=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)
    signed_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)

    application = relationship("Application", back_populates="lease_signatures")

    def __repr__(self):
        return f"<LeaseSignature(id={self.id}, role='{self.signer_role}')>"


class LeaseSigningDraft(Base):
    """Autosaved, unsubmitted lease signing form. Advisory only."""

    __tablename__ = "lease_signing_drafts"
    __table_args__ = (
        UniqueConstraint("application_id", "user_id", name="uq_lease_signing_drafts_app_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id"), nullable=False, index=True)
    user_id = Column(String(255), nullable=False)
    form_data = Column(JSON, nullable=False)
    saved_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow, nullable=False,
    )

    def __repr__(self):
        return f"<LeaseSigningDraft(application_id={self.application_id}, user='{self.user_id}')>"


class AuditEvent(Base):
    """Append-only audit trail. INSERT + SELECT only -- no UPDATE or DELETE."""

    __tablename__ = "audit_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    prev_hash = Column(String(64), nullable=True)
    user_id = Column(String(255), nullable=True)
    user_role = Column(String(50), nullable=True)
    event_type = Column(String(100), nullable=False, index=True)
    application_id = Column(Integer, nullable=True, index=True)
    event_data = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<AuditEvent(id={self.id}, type='{self.event_type}')>"
