"""Collection import library public API.

Turns collection-tracker exports into draft listing records: header
validation, cell normalization, row mapping and the portfolio URL client.
"""

from card_importer.lib.collection_import.headers import EXPECTED_HEADERS, HeaderValidation, validate_headers
from card_importer.lib.collection_import.mapper import CollectionRow, MappedRow, map_row, resolve_columns
from card_importer.lib.collection_import.normalizer import (
    is_recognized_grade,
    normalize_condition,
    parse_grading,
    parse_price,
    parse_quantity,
)
from card_importer.lib.collection_import.parser import ParsedCollection, parse_collection_csv
from card_importer.lib.collection_import.portfolio import PortfolioImportClient, validate_portfolio_url
from card_importer.lib.collection_import.types import (
    CandidateRecord,
    CollectionImportError,
    CollectionParseError,
    Condition,
    GradingInfo,
    ImportProgress,
    ImportSource,
    ImportStatus,
    ImportSummary,
    InvalidHeadersError,
    InvalidPortfolioUrlError,
    PortfolioImportError,
)

__all__ = [
    "EXPECTED_HEADERS",
    "CandidateRecord",
    "CollectionImportError",
    "CollectionParseError",
    "CollectionRow",
    "Condition",
    "GradingInfo",
    "HeaderValidation",
    "ImportProgress",
    "ImportSource",
    "ImportStatus",
    "ImportSummary",
    "InvalidHeadersError",
    "InvalidPortfolioUrlError",
    "MappedRow",
    "ParsedCollection",
    "PortfolioImportClient",
    "PortfolioImportError",
    "is_recognized_grade",
    "map_row",
    "normalize_condition",
    "parse_collection_csv",
    "parse_grading",
    "parse_price",
    "parse_quantity",
    "resolve_columns",
    "validate_headers",
    "validate_portfolio_url",
]
