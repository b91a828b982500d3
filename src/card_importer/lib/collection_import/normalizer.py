"""Field normalizers for collection export cells.

Every function here is total: any string (or None) maps to a defined
result, with ``None`` meaning "not recognised" where a value can be absent.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from card_importer.lib.collection_import.types import Condition, GradingInfo

# Export vocabulary → internal tier. Canonical tier spellings map to themselves
# so normalizing an already-normalized value is stable.
CONDITION_SYNONYMS: dict[str, Condition] = {
    "near mint": Condition.LIKE_NEW,
    "nm": Condition.LIKE_NEW,
    "mint": Condition.LIKE_NEW,
    "like new": Condition.LIKE_NEW,
    "like_new": Condition.LIKE_NEW,
    "like-new": Condition.LIKE_NEW,
    "lightly played": Condition.EXCELLENT,
    "lp": Condition.EXCELLENT,
    "excellent": Condition.EXCELLENT,
    "moderately played": Condition.GOOD,
    "mp": Condition.GOOD,
    "good": Condition.GOOD,
    "heavily played": Condition.FAIR,
    "hp": Condition.FAIR,
    "fair": Condition.FAIR,
    "damaged": Condition.FAIR,
    "poor": Condition.FAIR,
}

GRADING_SERVICES = ("PSA", "CGC", "BGS", "Beckett")

_GRADING_PATTERN = re.compile(
    r"^(" + "|".join(GRADING_SERVICES) + r")\s+([\d.]+)$",
    re.IGNORECASE,
)
_PRICE_STRIP = re.compile(r"[$£€,\s]")
_LEADING_DECIMAL = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)")
_LEADING_INT = re.compile(r"^[+-]?\d+")
_CENTS = Decimal("0.01")


def normalize_condition(text: str | None) -> Condition | None:
    """Map a free-text condition to an internal tier.

    Args:
        text: Condition cell, e.g. "Near Mint" or "LP".

    Returns:
        The matching Condition, or None when the text is not recognised.
    """
    return CONDITION_SYNONYMS.get((text or "").strip().lower())


def parse_grading(text: str | None) -> GradingInfo:
    """Parse a grade cell such as "Ungraded", "PSA 10" or "CGC 9.5".

    Unparseable text degrades to ungraded rather than raising.
    """
    normalized = (text or "").strip()
    if not normalized or normalized.lower() == "ungraded":
        return GradingInfo(is_graded=False)

    match = _GRADING_PATTERN.match(normalized)
    if match:
        return GradingInfo(
            is_graded=True,
            grading_service=match.group(1).upper(),
            grading_score=match.group(2),
        )

    return GradingInfo(is_graded=False)


def is_recognized_grade(text: str | None) -> bool:
    """Whether ``parse_grading`` understood the text instead of defaulting."""
    normalized = (text or "").strip()
    if not normalized or normalized.lower() == "ungraded":
        return True
    return _GRADING_PATTERN.match(normalized) is not None


def parse_price(text: str | None) -> Decimal | None:
    """Parse a market price cell into a non-negative amount.

    Currency symbols and thousands separators are stripped and the leading
    number is taken, so "£1,200.50" and "12.00 GBP" both parse.

    Args:
        text: Price cell.

    Returns:
        The price rounded to cents, or None for empty, "n/a", non-numeric
        or negative input.
    """
    if not text or text.strip().lower() == "n/a":
        return None

    cleaned = _PRICE_STRIP.sub("", text)
    match = _LEADING_DECIMAL.match(cleaned)
    if not match:
        return None

    try:
        price = Decimal(match.group(0))
        if price < 0:
            return None
        return price.quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # more digits than the decimal context can hold
        return None


def parse_quantity(text: str | None) -> int:
    """Parse a quantity cell; anything but a positive integer prefix yields 1."""
    match = _LEADING_INT.match((text or "").strip())
    if not match:
        return 1
    try:
        quantity = int(match.group(0))
    except ValueError:
        # exceeds the interpreter's int string conversion limit
        return 1
    return quantity if quantity > 0 else 1
