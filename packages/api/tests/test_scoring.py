# This project was developed with assistance from AI tools.
"""Tests for the pure eligibility scoring engine."""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from db.enums import CreditTier, EmploymentStatus

from src.schemas.scoring import ApplicationSnapshot, DocumentFlags
from src.services.scoring import (
    MAX_SCORE,
    REQUIRED_DOCUMENTS,
    build_snapshot,
    calculate_score,
    parse_years,
)

from tests.factories import strong_form


def _all_docs(verified=True):
    return {name: DocumentFlags(uploaded=True, verified=verified) for name in REQUIRED_DOCUMENTS}


def _strong_snapshot(**overrides) -> ApplicationSnapshot:
    values = {
        "monthly_income": Decimal("7000"),
        "monthly_rent": Decimal("2000"),
        "credit_tier": CreditTier.EXCELLENT,
        "years_renting": 5,
        "has_landlord_reference": True,
        "employment_status": EmploymentStatus.EMPLOYED,
        "years_employed": 4,
        "documents": _all_docs(),
    }
    values.update(overrides)
    return ApplicationSnapshot(**values)


def test_max_score_is_100():
    assert MAX_SCORE == 100


def test_strong_application_scores_max_without_flags():
    result = calculate_score(_strong_snapshot())
    assert result.total_score == MAX_SCORE
    assert result.flags == []


def test_same_snapshot_gives_identical_breakdown():
    snapshot = _strong_snapshot(credit_tier=CreditTier.FAIR, has_eviction=True)
    assert calculate_score(snapshot) == calculate_score(snapshot)


def test_empty_snapshot_scores_low_and_flags_everything():
    result = calculate_score(ApplicationSnapshot())
    assert 0 <= result.total_score < 30
    assert "no_income_provided" in result.flags
    assert "no_credit_information" in result.flags
    assert "limited_rental_history" in result.flags
    for name in REQUIRED_DOCUMENTS:
        assert f"missing_document:{name}" in result.flags


@pytest.mark.parametrize(
    "income,expected",
    [("6000", 25), ("5000", 20), ("4000", 14), ("3000", 6)],
)
def test_income_ratio_tiers(income, expected):
    result = calculate_score(_strong_snapshot(monthly_income=Decimal(income)))
    assert result.income_score == expected


def test_ratio_below_threshold_is_flagged():
    result = calculate_score(_strong_snapshot(monthly_income=Decimal("4000")))
    assert "income_ratio_below_threshold" in result.flags


def test_threshold_is_configurable():
    snapshot = _strong_snapshot(monthly_income=Decimal("5000"))
    assert "income_ratio_below_threshold" not in calculate_score(snapshot).flags
    strict = calculate_score(snapshot, income_ratio_threshold=3.0)
    assert "income_ratio_below_threshold" in strict.flags


def test_co_applicant_income_counts_toward_ratio():
    snapshot = _strong_snapshot(
        monthly_income=Decimal("3000"),
        co_applicant_incomes=(Decimal("3000"),),
    )
    assert calculate_score(snapshot).income_score == 25


def test_unknown_rent_uses_absolute_income_tiers():
    result = calculate_score(_strong_snapshot(monthly_rent=None, monthly_income=Decimal("4200")))
    assert result.income_score == 22
    assert "rent_unknown" in result.flags


@pytest.mark.parametrize(
    "tier,points",
    [(CreditTier.EXCELLENT, 25), (CreditTier.GOOD, 20), (CreditTier.FAIR, 15), (CreditTier.POOR, 5)],
)
def test_credit_tiers(tier, points):
    assert calculate_score(_strong_snapshot(credit_tier=tier)).credit_score == points


def test_eviction_penalty_never_goes_negative():
    snapshot = _strong_snapshot(years_renting=0.5, has_eviction=True, has_landlord_reference=False)
    result = calculate_score(snapshot)
    assert result.rental_history_score == 0
    assert "previous_eviction" in result.flags
    assert "missing_landlord_reference" in result.flags


def test_unemployed_scores_minimum_employment():
    result = calculate_score(_strong_snapshot(employment_status=EmploymentStatus.UNEMPLOYED))
    assert result.employment_score == 3
    assert "unemployed" in result.flags


def test_uploaded_but_unverified_documents():
    result = calculate_score(_strong_snapshot(documents=_all_docs(verified=False)))
    assert result.documents_score == 12


def test_total_is_sum_of_categories():
    result = calculate_score(_strong_snapshot(credit_tier=CreditTier.GOOD, years_employed=1))
    assert result.total_score == (
        result.income_score
        + result.credit_score
        + result.rental_history_score
        + result.employment_score
        + result.documents_score
    )


# ---------------------------------------------------------------------------
# Snapshot extraction
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "value,expected",
    [(3, 3.0), ("2 years", 2.0), ("18 months", 1.5), ("2.5", 2.5), ("n/a", None), (None, None), (True, None)],
)
def test_parse_years(value, expected):
    assert parse_years(value) == expected


def test_build_snapshot_reads_form_sections():
    form = strong_form()
    form["co_applicants"] = [{"full_name": "Sam", "monthly_income": "1500"}, {"full_name": "Kid"}]
    row = SimpleNamespace(monthly_rent=Decimal("2000.00"), **form)
    snapshot = build_snapshot(row)
    assert snapshot.monthly_income == Decimal("7000")
    assert snapshot.co_applicant_incomes == (Decimal("1500"),)
    assert snapshot.credit_tier == CreditTier.EXCELLENT
    assert snapshot.has_landlord_reference is True
    assert snapshot.documents["id"].verified is True


def test_build_snapshot_ignores_unknown_enum_values():
    row = SimpleNamespace(
        monthly_rent=None,
        personal_info={"credit_tier": "stellar"},
        employment={"status": "astronaut", "monthly_income": "abc"},
        rental_history=None,
        co_applicants=None,
        document_status=None,
    )
    snapshot = build_snapshot(row)
    assert snapshot.credit_tier is None
    assert snapshot.employment_status is None
    assert snapshot.monthly_income is None
