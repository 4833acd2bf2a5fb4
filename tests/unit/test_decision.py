"""Tests for the multi-criterion match classifier."""

import pytest

from orgdedupe.decision import (
    MatchCriterion,
    MatchResult,
    Thresholds,
    are_duplicates,
    center_similarity,
    classify_pair,
    location_similarity,
)
from orgdedupe.errors import ConfigurationError

DEFAULT = Thresholds()


# ---------------------------------------------------------------------------
# Rule 1: email
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_shared_email_overrides_name(make_record) -> None:
    """Same email is a duplicate regardless of center names."""
    a = make_record("Alpha", email="a@x.com")
    b = make_record("Completely Different Organization", email="A@X.com ")

    result = classify_pair(a, b, DEFAULT)

    assert result.is_duplicate
    assert result.criterion == MatchCriterion.EMAIL_EXACT
    assert result.email_similarity == 1.0
    # Later rules are never evaluated
    assert result.center_similarity is None
    assert result.location_similarity is None


@pytest.mark.unit
def test_similar_but_distinct_emails_fall_through(make_record) -> None:
    """Emails below the email threshold do not match on their own."""
    a = make_record("Alpha", email="ana@example.org")
    b = make_record("Omega", email="ana@example.com")

    result = classify_pair(a, b, DEFAULT)

    assert not result.is_duplicate
    assert result.criterion == MatchCriterion.NONE
    assert result.email_similarity == pytest.approx(0.8)


@pytest.mark.unit
def test_one_sided_email_is_not_evaluated(make_record) -> None:
    """A blank email on either side skips the email rule."""
    a = make_record("Alpha", email="a@x.com")
    b = make_record("Omega")

    result = classify_pair(a, b, DEFAULT)

    assert result.email_similarity is None
    assert not result


# ---------------------------------------------------------------------------
# Rule 2: center name
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_name_match_ignores_institution_prefix(make_record) -> None:
    """'IES Lope de Vega' and 'Lope de Vega' are the same center."""
    a = make_record("IES Lope de Vega", locality="Madrid")
    b = make_record("Lope de Vega", locality="Madrid")

    result = classify_pair(a, b, DEFAULT)

    assert result.criterion == MatchCriterion.NAME_MATCH
    assert result.center_similarity == 1.0


@pytest.mark.unit
def test_empty_normalized_names_never_match(make_record) -> None:
    """Names that normalize to nothing are not evidence of identity."""
    a = make_record("IES")
    b = make_record("Colegio")
    permissive = Thresholds(center_name=0.0)

    assert center_similarity(a, b) == 0.0
    assert classify_pair(a, b, permissive).criterion == MatchCriterion.NONE


# ---------------------------------------------------------------------------
# Rule 3: moderate name + location
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_moderate_name_with_same_location(make_record) -> None:
    """A moderate name match is accepted when the location agrees."""
    a = make_record("Colegio San Jose", locality="Sevilla")
    b = make_record("San Josefa", locality="Sevilla")

    result = classify_pair(a, b, DEFAULT)

    assert result.criterion == MatchCriterion.NAME_LOCATION_MATCH
    assert result.center_similarity == pytest.approx(0.8)
    assert result.location_similarity == 1.0


@pytest.mark.unit
def test_moderate_name_with_different_location(make_record) -> None:
    """A moderate name match alone is not enough."""
    a = make_record("San Jose", locality="Sevilla")
    b = make_record("San Josefa", locality="Cadiz")

    result = classify_pair(a, b, DEFAULT)

    assert not result.is_duplicate
    assert result.center_similarity == pytest.approx(0.8)


@pytest.mark.unit
def test_missing_locations_do_not_corroborate(make_record) -> None:
    """Two records with no location fields share no location evidence."""
    a = make_record("San Jose")
    b = make_record("San Josefa")

    assert location_similarity(a, b) == 0.0
    assert classify_pair(a, b, DEFAULT).criterion == MatchCriterion.NONE


# ---------------------------------------------------------------------------
# Rule 4: representative + location
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_representative_with_similar_location(make_record) -> None:
    """Same representative in the same place is a duplicate."""
    a = make_record("Alpha Hall", representative="Ana Pérez", locality="Madrid")
    b = make_record("Zeta Foundation", representative="ana pérez", locality="Madrid")

    result = classify_pair(a, b, DEFAULT)

    assert result.criterion == MatchCriterion.REPRESENTATIVE_LOCATION_MATCH
    assert result.representative_similarity == 1.0


@pytest.mark.unit
def test_representative_in_other_location(make_record) -> None:
    """Same representative elsewhere is not a duplicate."""
    a = make_record("Alpha Hall", representative="Ana Pérez", locality="Madrid")
    b = make_record("Zeta Foundation", representative="Ana Pérez", locality="Barcelona")

    result = classify_pair(a, b, DEFAULT)

    assert result.criterion == MatchCriterion.NONE
    assert result.representative_similarity == 1.0


# ---------------------------------------------------------------------------
# General properties
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("left", "right"),
    [
        pytest.param({"center": "IES Lope de Vega"}, {"center": "Lope de Vega"}, id="name"),
        pytest.param(
            {"center": "San Jose", "locality": "Sevilla"},
            {"center": "San Josefa", "locality": "Sevilla"},
            id="name-location",
        ),
        pytest.param({"center": "Alpha"}, {"center": "Omega"}, id="distinct"),
    ],
)
def test_classification_is_symmetric(make_record, left, right) -> None:
    """classify(a, b) and classify(b, a) agree."""
    a = make_record(**left)
    b = make_record(**right)

    assert classify_pair(a, b, DEFAULT) == classify_pair(b, a, DEFAULT)


@pytest.mark.unit
def test_are_duplicates_returns_decision_and_criterion(make_record) -> None:
    """are_duplicates is a thin tuple wrapper over classify_pair."""
    a = make_record("Lope de Vega")
    b = make_record("IES Lope de Vega")

    assert are_duplicates(a, b, DEFAULT) == (True, MatchCriterion.NAME_MATCH)


@pytest.mark.unit
def test_match_result_to_dict() -> None:
    """Criterion is serialized as its string value."""
    data = MatchResult(True, MatchCriterion.NAME_MATCH, center_similarity=1.0).to_dict()

    assert data["criterion"] == "name_match"
    assert data["location_similarity"] is None


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_threshold_defaults() -> None:
    """Defaults match the documented values."""
    assert DEFAULT.to_dict() == {
        "center_name": 0.85,
        "location": 0.80,
        "email": 0.95,
        "representative": 0.90,
    }


@pytest.mark.unit
@pytest.mark.parametrize(
    "kwargs",
    [
        pytest.param({"center_name": 1.5}, id="above-one"),
        pytest.param({"location": -0.1}, id="negative"),
        pytest.param({"email": "high"}, id="not-a-number"),
        pytest.param({"representative": True}, id="bool"),
    ],
)
def test_invalid_thresholds_rejected(kwargs) -> None:
    """Thresholds outside [0, 1] or non-numeric raise ConfigurationError."""
    with pytest.raises(ConfigurationError) as exc_info:
        Thresholds(**kwargs)

    assert exc_info.value.option == next(iter(kwargs))


@pytest.mark.unit
def test_thresholds_from_dict_accepts_camel_case_alias() -> None:
    """centerName maps to center_name; missing keys keep defaults."""
    thresholds = Thresholds.from_dict({"centerName": 0.9, "location": 0.7})

    assert thresholds.center_name == 0.9
    assert thresholds.location == 0.7
    assert thresholds.email == 0.95


@pytest.mark.unit
def test_thresholds_from_dict_rejects_unknown_key() -> None:
    """Unknown threshold names are configuration errors."""
    with pytest.raises(ConfigurationError, match="Unknown threshold"):
        Thresholds.from_dict({"phone": 0.5})
