"""Tests for the collection export CSV parser."""

from collections.abc import Callable
from pathlib import Path

import pytest

from card_importer.lib.collection_import.headers import EXPECTED_HEADERS
from card_importer.lib.collection_import.parser import parse_collection_csv
from card_importer.lib.collection_import.types import CollectionParseError


class TestParseCollectionCsv:
    """Tests for parse_collection_csv."""

    def test_parses_headers_and_rows(self, export_row: Callable, export_csv: Callable) -> None:
        text = export_csv([export_row(**{"Product Name": "Charizard", "Market Price": "£120.00"})])

        parsed = parse_collection_csv(text)

        assert parsed.headers == list(EXPECTED_HEADERS)
        assert len(parsed) == 1
        assert parsed.rows[0]["Product Name"] == "Charizard"
        assert parsed.rows[0]["Market Price"] == "£120.00"

    def test_cells_stay_strings(self, export_row: Callable, export_csv: Callable) -> None:
        parsed = parse_collection_csv(export_csv([export_row(**{"Quantity": "007", "Card Number": "4"})]))
        assert parsed.rows[0]["Quantity"] == "007"
        assert parsed.rows[0]["Card Number"] == "4"
        assert parsed.rows[0]["Rarity"] == ""

    def test_na_text_is_not_converted(self, export_row: Callable, export_csv: Callable) -> None:
        parsed = parse_collection_csv(export_csv([export_row(**{"Market Price": "N/A", "Notes": "NA"})]))
        assert parsed.rows[0]["Market Price"] == "N/A"
        assert parsed.rows[0]["Notes"] == "NA"

    def test_bytes_with_bom(self, export_row: Callable, export_csv: Callable) -> None:
        content = "\ufeff".encode() + export_csv([export_row(**{"Product Name": "Pikachu"})]).encode()
        parsed = parse_collection_csv(content)
        assert parsed.headers[0] == "Portfolio Name"

    def test_latin1_fallback(self) -> None:
        content = "Product Name,Set,Market Price\nPokémon Card,Base,£1\n".encode("latin-1")
        parsed = parse_collection_csv(content)
        assert parsed.rows[0]["Product Name"] == "Pokémon Card"
        assert parsed.rows[0]["Market Price"] == "£1"

    def test_skips_blank_lines(self) -> None:
        parsed = parse_collection_csv("Product Name,Set\nA,Base\n\n,\nB,Jungle\n")
        assert [r["Product Name"] for r in parsed.rows] == ["A", "B"]

    def test_short_rows_fill_with_empty(self) -> None:
        parsed = parse_collection_csv("Product Name,Set,Market Price\nA,Base\n")
        assert parsed.rows[0]["Market Price"] == ""

    def test_strips_header_whitespace(self) -> None:
        parsed = parse_collection_csv(" Product Name , Set \nA,Base\n")
        assert parsed.headers == ["Product Name", "Set"]

    def test_reads_path(self, tmp_path: Path, export_row: Callable, export_csv: Callable) -> None:
        csv_path = tmp_path / "collection.csv"
        csv_path.write_text(export_csv([export_row(), export_row()]), encoding="utf-8")
        assert len(parse_collection_csv(csv_path)) == 2

    def test_header_only(self) -> None:
        parsed = parse_collection_csv(",".join(EXPECTED_HEADERS) + "\n")
        assert parsed.headers == list(EXPECTED_HEADERS)
        assert parsed.rows == []

    @pytest.mark.parametrize("content", ["", "   \n\n", b""])
    def test_empty_content_raises(self, content: str | bytes) -> None:
        with pytest.raises(CollectionParseError):
            parse_collection_csv(content)

    def test_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(CollectionParseError, match="Cannot read"):
            parse_collection_csv(tmp_path / "missing.csv")
