# This project was developed with assistance from AI tools.
"""Application eligibility scoring.

Pure functions -- no DB calls, fully testable with plain values.
``calculate_score`` maps an ApplicationSnapshot to a ScoreBreakdown; the
same snapshot always yields an identical breakdown. Persisting the result
is the caller's job (see services/review.py).
"""

import re
from decimal import Decimal

from db.enums import CreditTier, EmploymentStatus

from ..schemas.scoring import ApplicationSnapshot, DocumentFlags, ScoreBreakdown

MAX_INCOME = 25
MAX_CREDIT = 25
MAX_RENTAL_HISTORY = 20
MAX_EMPLOYMENT = 15
MAX_DOCUMENTS = 15
MAX_SCORE = MAX_INCOME + MAX_CREDIT + MAX_RENTAL_HISTORY + MAX_EMPLOYMENT + MAX_DOCUMENTS

REQUIRED_DOCUMENTS: tuple[str, ...] = ("id", "proof_of_income", "employment_verification")

DEFAULT_INCOME_RATIO_THRESHOLD = 2.5

# (minimum income-to-rent ratio, points), checked top-down.
_RATIO_TIERS: tuple[tuple[float, int], ...] = ((3.0, 25), (2.5, 20), (2.0, 14))
_RATIO_FLOOR_POINTS = 6

# Used only when the listing has no rent on file.
_ABSOLUTE_INCOME_TIERS: tuple[tuple[Decimal, int], ...] = (
    (Decimal("5000"), 25),
    (Decimal("4000"), 22),
    (Decimal("3000"), 18),
    (Decimal("2000"), 12),
)
_ABSOLUTE_FLOOR_POINTS = 5

_CREDIT_POINTS: dict[CreditTier, int] = {
    CreditTier.EXCELLENT: 25,
    CreditTier.GOOD: 20,
    CreditTier.FAIR: 15,
    CreditTier.POOR: 5,
}

_RENTAL_TIERS: tuple[tuple[float, int], ...] = ((3, 20), (2, 16), (1, 12))
EVICTION_PENALTY = 15
MISSING_REFERENCE_PENALTY = 2

_TENURED_STATUSES = frozenset({EmploymentStatus.EMPLOYED, EmploymentStatus.SELF_EMPLOYED})

_YEARS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(years?|yrs?|months?|mos?)?", re.IGNORECASE)


def _score_income(snapshot: ApplicationSnapshot, threshold: float, flags: list[str]) -> int:
    total_income = (snapshot.monthly_income or Decimal("0")) + sum(
        snapshot.co_applicant_incomes, Decimal("0")
    )
    if total_income <= 0:
        flags.append("no_income_provided")
        return 0

    rent = snapshot.monthly_rent
    if rent is None or rent <= 0:
        flags.append("rent_unknown")
        for minimum, points in _ABSOLUTE_INCOME_TIERS:
            if total_income >= minimum:
                return points
        flags.append("low_income")
        return _ABSOLUTE_FLOOR_POINTS

    ratio = float(total_income / rent)
    if ratio < threshold:
        flags.append("income_ratio_below_threshold")
    for minimum, points in _RATIO_TIERS:
        if ratio >= minimum:
            return points
    return _RATIO_FLOOR_POINTS


def _score_credit(snapshot: ApplicationSnapshot, flags: list[str]) -> int:
    if snapshot.credit_tier is None:
        flags.append("no_credit_information")
        return 0
    if snapshot.credit_tier == CreditTier.POOR:
        flags.append("poor_credit")
    return _CREDIT_POINTS[snapshot.credit_tier]


def _score_rental_history(snapshot: ApplicationSnapshot, flags: list[str]) -> int:
    years = snapshot.years_renting or 0
    score = 0
    for minimum, points in _RENTAL_TIERS:
        if years >= minimum:
            score = points
            break
    else:
        if years > 0:
            score = 8
        else:
            score = 5
            flags.append("limited_rental_history")

    if snapshot.has_eviction:
        score = max(0, score - EVICTION_PENALTY)
        flags.append("previous_eviction")

    if years > 0 and not snapshot.has_landlord_reference:
        score = max(0, score - MISSING_REFERENCE_PENALTY)
        flags.append("missing_landlord_reference")

    return score


def _score_employment(snapshot: ApplicationSnapshot, flags: list[str]) -> int:
    status = snapshot.employment_status
    if status == EmploymentStatus.UNEMPLOYED:
        flags.append("unemployed")
        return 3

    years = snapshot.years_employed or 0
    if status is None or status in _TENURED_STATUSES:
        if years >= 2:
            return 15
        if years >= 1:
            return 12
    return 8


def _score_documents(snapshot: ApplicationSnapshot, flags: list[str]) -> int:
    uploaded = 0
    verified = 0
    for name in REQUIRED_DOCUMENTS:
        doc = snapshot.documents.get(name, DocumentFlags())
        if doc.uploaded or doc.verified:
            uploaded += 1
        else:
            flags.append(f"missing_document:{name}")
        if doc.verified:
            verified += 1

    required = len(REQUIRED_DOCUMENTS)
    if verified >= required:
        return 15
    if uploaded >= required:
        return 12
    if uploaded == 2:
        return 8
    if uploaded == 1:
        return 5
    return 0


def calculate_score(
    snapshot: ApplicationSnapshot,
    *,
    income_ratio_threshold: float = DEFAULT_INCOME_RATIO_THRESHOLD,
) -> ScoreBreakdown:
    """Score an application snapshot.

    Categories are independent; the total is clamped to [0, MAX_SCORE].
    Flags are emitted in category order (income, credit, rental history,
    employment, documents).
    """
    flags: list[str] = []
    income = _score_income(snapshot, income_ratio_threshold, flags)
    credit = _score_credit(snapshot, flags)
    rental = _score_rental_history(snapshot, flags)
    employment = _score_employment(snapshot, flags)
    documents = _score_documents(snapshot, flags)

    total = max(0, min(MAX_SCORE, income + credit + rental + employment + documents))
    return ScoreBreakdown(
        income_score=income,
        credit_score=credit,
        rental_history_score=rental,
        employment_score=employment,
        documents_score=documents,
        total_score=total,
        max_score=MAX_SCORE,
        flags=flags,
    )


# ---------------------------------------------------------------------------
# Snapshot extraction
# ---------------------------------------------------------------------------


def parse_years(value) -> float | None:
    """Accept numbers or free text like '3 years', '18 months', '2.5'."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    match = _YEARS_RE.search(str(value))
    if not match:
        return None
    amount = float(match.group(1))
    unit = (match.group(2) or "").lower()
    if unit.startswith("mo"):
        return amount / 12
    return amount


def _to_decimal(value) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except ArithmeticError:
        return None


def _enum_or_none(enum_cls, value):
    try:
        return enum_cls(value) if value is not None else None
    except ValueError:
        return None


def build_snapshot(application) -> ApplicationSnapshot:
    """Freeze the scoring inputs from an Application row's form sections."""
    personal = application.personal_info or {}
    employment = application.employment or {}
    rental = application.rental_history or {}
    co_applicants = application.co_applicants or []
    documents = application.document_status or {}

    co_incomes = tuple(
        income
        for income in (_to_decimal(co.get("monthly_income")) for co in co_applicants)
        if income is not None
    )
    has_reference = bool(rental.get("landlord_name") or rental.get("landlord_phone"))

    return ApplicationSnapshot(
        monthly_income=_to_decimal(employment.get("monthly_income")),
        co_applicant_incomes=co_incomes,
        monthly_rent=_to_decimal(application.monthly_rent),
        credit_tier=_enum_or_none(CreditTier, personal.get("credit_tier")),
        years_renting=parse_years(rental.get("years_renting")),
        has_eviction=bool(rental.get("has_eviction")),
        has_landlord_reference=has_reference,
        employment_status=_enum_or_none(EmploymentStatus, employment.get("status")),
        years_employed=parse_years(employment.get("years_employed")),
        documents={
            name: DocumentFlags(
                uploaded=bool(state.get("uploaded")),
                verified=bool(state.get("verified")),
            )
            for name, state in documents.items()
            if isinstance(state, dict)
        },
    )
