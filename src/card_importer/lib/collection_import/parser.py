"""CSV parser for collection exports.

Reads the whole upload into a header list and a list of raw rows. Cells are
kept as strings exactly as exported (trimmed), so every interpretation
happens in the normalizer.
"""

import io
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd
from loguru import logger

from card_importer.lib.collection_import.types import CollectionParseError

ENCODINGS = ("utf-8-sig", "latin-1")


@dataclass
class ParsedCollection:
    """A decoded export: header labels in file order and one dict per row."""

    headers: list[str]
    rows: list[dict[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def _keep_fields(bad_line: list[str]) -> list[str]:
    # Rows with extra cells keep their leading cells; pandas drops the rest.
    return bad_line


def _decode(content: bytes | str | Path) -> str:
    if isinstance(content, Path):
        try:
            content = content.read_bytes()
        except OSError as e:
            msg = f"Cannot read {content}: {e}"
            raise CollectionParseError(msg) from e

    if isinstance(content, str):
        return content.removeprefix("\ufeff")

    for encoding in ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    msg = "Cannot detect file encoding"
    raise CollectionParseError(msg)


def parse_collection_csv(content: bytes | str | Path) -> ParsedCollection:
    """Parse a collection export into headers and raw rows.

    Blank lines are skipped and ragged rows are tolerated: missing cells
    read as empty strings and surplus cells are dropped.

    Args:
        content: File bytes, decoded text or a path to the file.

    Returns:
        ParsedCollection with stripped header labels and trimmed cells.

    Raises:
        CollectionParseError: If the content is empty or not tabular text.
    """
    text = _decode(content)
    if not text.strip():
        msg = "The file is empty"
        raise CollectionParseError(msg)

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=_keep_fields,
        )
    except pd.errors.EmptyDataError as e:
        msg = "The file has no header row"
        raise CollectionParseError(msg) from e
    except (pd.errors.ParserError, ValueError) as e:
        msg = f"Could not parse CSV: {e}"
        raise CollectionParseError(msg) from e

    frame.columns = [str(c).strip() for c in frame.columns]
    frame = frame.fillna("")

    rows = []
    for record in frame.to_dict(orient="records"):
        row = {str(k): str(v).strip() for k, v in record.items()}
        # Rows whose cells are all blank (e.g. ",,,,") carry nothing to import.
        if any(row.values()):
            rows.append(row)

    logger.debug(f"Parsed collection export: {len(frame.columns)} columns, {len(rows)} rows")
    return ParsedCollection(headers=list(frame.columns), rows=rows)
