"""Map collection export rows to candidate listings.

A raw row is first resolved into a ``CollectionRow`` by tolerant header
lookup, then ``map_row`` turns it into a CandidateRecord plus the list of
human-readable problems found along the way.
"""

import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields
from decimal import Decimal
from typing import Any

from card_importer.lib.collection_import.normalizer import (
    is_recognized_grade,
    normalize_condition,
    parse_grading,
    parse_price,
    parse_quantity,
)
from card_importer.lib.collection_import.types import DEFAULT_CONDITION, CandidateRecord

DEFAULT_PORTFOLIO_NAME = "Imported Collection"

# CollectionRow field → header labels seen in exports, preferred label first.
EXPORT_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "portfolio_name": ("Portfolio Name",),
    "category": ("Category",),
    "set_name": ("Set",),
    "product_name": ("Product Name",),
    "card_number": ("Card Number",),
    "rarity": ("Rarity",),
    "variance": ("Variance",),
    "grade": ("Grade",),
    "card_condition": ("Card Condition",),
    "average_cost_paid": ("Average Cost Paid",),
    "quantity": ("Quantity",),
    "market_price": ("Market Price",),
    "watchlist": ("Watchlist",),
    "date_added": ("Date Added",),
    "notes": ("Notes", "Note"),
}


def resolve_columns(headers: Iterable[str]) -> dict[str, str]:
    """Resolve which header supplies each CollectionRow field.

    Tries an exact match, then a case-insensitive match, then a
    case-insensitive prefix match so dated labels such as
    "Market Price (As of 2025-10-15)" still resolve.

    Args:
        headers: Column names of the parsed file.

    Returns:
        Dict of field name → header; unresolved fields are omitted.
    """
    header_list = [h for h in headers if isinstance(h, str)]
    resolved: dict[str, str] = {}

    for field_name, aliases in EXPORT_COLUMN_ALIASES.items():
        match = next((a for a in aliases if a in header_list), None)
        if match is None:
            lowered = {h.strip().lower(): h for h in header_list}
            match = next((lowered[a.lower()] for a in aliases if a.lower() in lowered), None)
        if match is None:
            match = next(
                (h for a in aliases for h in header_list if h.strip().lower().startswith(a.lower())),
                None,
            )
        if match is not None:
            resolved[field_name] = match

    return resolved


def _cell(raw: Mapping[str, Any], header: str | None) -> str:
    if header is None:
        return ""
    value = raw.get(header)
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class CollectionRow:
    """The fifteen export fields of one row, as trimmed strings."""

    portfolio_name: str = ""
    category: str = ""
    set_name: str = ""
    product_name: str = ""
    card_number: str = ""
    rarity: str = ""
    variance: str = ""
    grade: str = ""
    card_condition: str = ""
    average_cost_paid: str = ""
    quantity: str = "1"
    market_price: str = ""
    watchlist: str = ""
    date_added: str = ""
    notes: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], columns: Mapping[str, str] | None = None) -> "CollectionRow":
        """Build a row from a header → cell mapping.

        Args:
            raw: One parsed row.
            columns: Pre-resolved field → header map (see ``resolve_columns``);
                resolved from ``raw``'s keys when omitted.
        """
        if columns is None:
            columns = resolve_columns(raw.keys())
        values = {f.name: _cell(raw, columns.get(f.name)) for f in fields(cls)}
        values["quantity"] = values["quantity"] or "1"
        return cls(**values)


@dataclass
class MappedRow:
    """Result of mapping one row.

    ``record`` is None when the row has no usable title; such a row is
    never inserted.
    """

    record: CandidateRecord | None
    problems: list[str] = field(default_factory=list)
    unit_count: int = 1


def build_title(row: CollectionRow) -> str | None:
    """Product name, else "<set> - <number>" from whichever parts exist."""
    if row.product_name:
        return row.product_name
    composed = " - ".join(part for part in (row.set_name, row.card_number) if part)
    return composed or None


def build_description(row: CollectionRow) -> str | None:
    parts = []
    if row.variance:
        parts.append(f"Variance: {row.variance}")
    if row.notes:
        parts.append(row.notes)
    return "\n".join(parts) or None


def map_row(row: CollectionRow, owner_id: uuid.UUID, *, currency: str = "GBP") -> MappedRow:
    """Map one export row to a candidate listing.

    Problems are informational; only a missing title prevents the record
    from being built.

    Args:
        row: The resolved export row.
        owner_id: The user the listings will belong to.
        currency: Listing currency code.

    Returns:
        MappedRow with the record (or None), problems and unit count.
    """
    problems: list[str] = []
    unit_count = parse_quantity(row.quantity)

    price = parse_price(row.market_price)
    if price is None:
        problems.append("Invalid or missing market price")

    condition = normalize_condition(row.card_condition)
    if condition is None:
        if row.card_condition:
            problems.append(f"Unknown condition: {row.card_condition}")
        else:
            problems.append("Missing card condition")

    grading = parse_grading(row.grade)
    if not is_recognized_grade(row.grade):
        problems.append(f"Unrecognized grade '{row.grade}' imported as ungraded")

    title = build_title(row)
    if title is None:
        problems.append("Missing product name")
    if not row.set_name:
        problems.append("Missing set")

    if title is None:
        return MappedRow(record=None, problems=problems, unit_count=unit_count)

    record = CandidateRecord(
        seller_id=owner_id,
        title=title,
        description=build_description(row),
        set_code=row.set_name or None,
        card_number=row.card_number or None,
        seller_price=price if price is not None else Decimal("0.00"),
        condition=condition or DEFAULT_CONDITION,
        currency=currency,
        portfolio_name=row.portfolio_name or DEFAULT_PORTFOLIO_NAME,
        import_metadata={
            "rarity": row.rarity,
            "variance": row.variance,
            "grade": row.grade,
            "average_cost": row.average_cost_paid,
            "watchlist": row.watchlist.upper() == "TRUE",
            "date_added": row.date_added,
            "note": row.notes,
            **grading.to_dict(),
        },
    )
    return MappedRow(record=record, problems=problems, unit_count=unit_count)
