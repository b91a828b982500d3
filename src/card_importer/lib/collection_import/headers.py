"""Header row validation for collection exports.

Checks the minimum shape of the upload before any row is processed. Header
text is matched loosely because the export tool renames columns between
versions (e.g. "Market Price (As of 2025-10-15)").
"""

from dataclasses import dataclass

EXPECTED_HEADERS: tuple[str, ...] = (
    "Portfolio Name",
    "Category",
    "Set",
    "Product Name",
    "Card Number",
    "Rarity",
    "Variance",
    "Grade",
    "Card Condition",
    "Average Cost Paid",
    "Quantity",
    "Market Price",
    "Watchlist",
    "Date Added",
    "Notes",
)

MIN_COLUMNS = len(EXPECTED_HEADERS)


@dataclass(frozen=True)
class HeaderValidation:
    """Outcome of header validation; ``message`` is set when invalid."""

    valid: bool
    message: str | None = None


def _any_contains(headers: list[str], *needles: str) -> bool:
    return any(needle in header.lower() for header in headers for needle in needles)


def validate_headers(headers: list[str]) -> HeaderValidation:
    """Validate that a header row looks like a collection export.

    Args:
        headers: Column names from the parsed file.

    Returns:
        HeaderValidation with a user-facing message when invalid.
    """
    if len(headers) < MIN_COLUMNS:
        return HeaderValidation(
            valid=False,
            message=(
                f"Expected {MIN_COLUMNS} columns, found {len(headers)}. "
                "Please use the exact Collectr export format."
            ),
        )

    has_product_name = _any_contains(headers, "product", "name")
    has_set = _any_contains(headers, "set")
    has_price = _any_contains(headers, "price", "market")

    if not (has_product_name and has_set and has_price):
        return HeaderValidation(
            valid=False,
            message="Missing required columns. Please ensure CSV has Product Name, Set, and Market Price columns.",
        )

    return HeaderValidation(valid=True)
