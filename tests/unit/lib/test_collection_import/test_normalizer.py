"""Tests for collection export cell normalizers."""

from decimal import Decimal

import pytest

from card_importer.lib.collection_import.normalizer import (
    CONDITION_SYNONYMS,
    is_recognized_grade,
    normalize_condition,
    parse_grading,
    parse_price,
    parse_quantity,
)
from card_importer.lib.collection_import.types import Condition, GradingInfo

ODD_INPUTS = [
    None,
    "",
    "   ",
    "\t\n",
    "n/a",
    "∞",
    "💎 PSA 10 💎",
    "1e400",
    "-",
    ".",
    "9" * 5000,
    "NaN",
    "$-$",
    "\x00\x01",
]


class TestNormalizeCondition:
    """Tests for normalize_condition."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Near Mint", Condition.LIKE_NEW),
            ("NM", Condition.LIKE_NEW),
            ("mint", Condition.LIKE_NEW),
            ("Lightly Played", Condition.EXCELLENT),
            ("lp", Condition.EXCELLENT),
            ("Moderately Played", Condition.GOOD),
            ("MP", Condition.GOOD),
            ("Heavily Played", Condition.FAIR),
            ("HP", Condition.FAIR),
            ("Damaged", Condition.FAIR),
            ("poor", Condition.FAIR),
        ],
    )
    def test_export_vocabulary(self, text: str, expected: Condition) -> None:
        assert normalize_condition(text) == expected

    def test_trims_and_ignores_case(self) -> None:
        assert normalize_condition("  nEaR mInT \t") == Condition.LIKE_NEW

    def test_unknown_returns_none(self) -> None:
        assert normalize_condition("Pristine") is None
        assert normalize_condition("") is None
        assert normalize_condition(None) is None

    @pytest.mark.parametrize("synonym", sorted(CONDITION_SYNONYMS))
    def test_normalizing_twice_is_stable(self, synonym: str) -> None:
        tier = normalize_condition(synonym)
        assert tier is not None
        assert normalize_condition(tier.value) == tier


class TestParseGrading:
    """Tests for parse_grading."""

    def test_ungraded(self) -> None:
        assert parse_grading("Ungraded") == GradingInfo(is_graded=False)

    def test_psa_10(self) -> None:
        assert parse_grading("PSA 10") == GradingInfo(is_graded=True, grading_service="PSA", grading_score="10")

    def test_garbage_is_ungraded(self) -> None:
        assert parse_grading("garbage text") == GradingInfo(is_graded=False)

    def test_service_is_upper_cased(self) -> None:
        info = parse_grading("beckett 9.5")
        assert info.grading_service == "BECKETT"
        assert info.grading_score == "9.5"

    def test_decimal_score_kept_as_text(self) -> None:
        assert parse_grading("CGC 9.5").grading_score == "9.5"

    def test_empty_is_ungraded(self) -> None:
        assert parse_grading("").is_graded is False
        assert parse_grading(None).is_graded is False

    def test_unknown_service_is_ungraded(self) -> None:
        assert parse_grading("SGC 10").is_graded is False

    def test_to_dict_shapes(self) -> None:
        assert parse_grading("Ungraded").to_dict() == {"is_graded": False}
        assert parse_grading("BGS 9").to_dict() == {
            "is_graded": True,
            "grading_service": "BGS",
            "grading_score": "9",
        }


class TestIsRecognizedGrade:
    """Tests for is_recognized_grade."""

    def test_recognized(self) -> None:
        assert is_recognized_grade("Ungraded")
        assert is_recognized_grade("")
        assert is_recognized_grade("PSA 10")

    def test_unrecognized(self) -> None:
        assert not is_recognized_grade("garbage text")
        assert not is_recognized_grade("PSA ten")


class TestParsePrice:
    """Tests for parse_price."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("£120.00", Decimal("120.00")),
            ("$5", Decimal("5.00")),
            ("€1,200.50", Decimal("1200.50")),
            ("12.345", Decimal("12.35")),
            ("0", Decimal("0.00")),
            ("12.00 GBP", Decimal("12.00")),
            (".5", Decimal("0.50")),
        ],
    )
    def test_parses_amounts(self, text: str, expected: Decimal) -> None:
        assert parse_price(text) == expected

    @pytest.mark.parametrize("text", ["", "N/A", "n/a", "abc", "-5", "-0.01", "£-3"])
    def test_absent_or_negative(self, text: str) -> None:
        assert parse_price(text) is None

    def test_none(self) -> None:
        assert parse_price(None) is None


class TestParseQuantity:
    """Tests for parse_quantity."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("1", 1), ("5", 5), (" 3 ", 3), ("2 copies", 2), ("0", 1), ("-4", 1), ("", 1), ("abc", 1)],
    )
    def test_quantities(self, text: str, expected: int) -> None:
        assert parse_quantity(text) == expected

    def test_none_is_one(self) -> None:
        assert parse_quantity(None) == 1


class TestTotality:
    """Every normalizer accepts arbitrary text without raising."""

    @pytest.mark.parametrize("text", ODD_INPUTS)
    def test_no_exceptions(self, text: str | None) -> None:
        normalize_condition(text)
        parse_grading(text)
        is_recognized_grade(text)
        price = parse_price(text)
        quantity = parse_quantity(text)

        assert price is None or price >= 0
        assert quantity >= 1
