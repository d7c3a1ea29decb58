"""
Tests for Database Utilities

Tests JSON payload parsing, pagination and CSV export.
"""
from datetime import datetime, timezone

from src.realty.db.utils import days_ago, generate_csv, paginate, pagination_meta, parse_json


class TestParseJson:
    """Tests for parse_json."""

    def test_parses_string(self):
        assert parse_json('{"price": 10}') == {"price": 10}

    def test_decoded_values_pass_through(self):
        payload = {"price": 10}
        assert parse_json(payload) is payload

    def test_malformed_returns_default(self):
        """Bad JSON and empty values fall back to the default."""
        assert parse_json("{not json", {}) == {}
        assert parse_json("", []) == []
        assert parse_json(None, "x") == "x"


class TestPagination:
    """Tests for pagination helpers."""

    def test_defaults_and_offset(self):
        assert paginate("3", "20") == {"page": 3, "limit": 20, "offset": 40}

    def test_invalid_values_fall_back(self):
        """Garbage falls back to page 1 and the default size; size is capped at 100."""
        assert paginate("abc", "xyz") == {"page": 1, "limit": 10, "offset": 0}
        assert paginate("-2", "500")["limit"] == 100
        assert paginate("-2", "500")["page"] == 1
        assert paginate(1, 0)["limit"] == 10

    def test_pagination_meta_rounds_pages_up(self):
        assert pagination_meta(1, 12, 25) == {"page": 1, "limit": 12, "total": 25, "pages": 3}
        assert pagination_meta(1, 12, 0)["pages"] == 0


class TestGenerateCsv:
    """Tests for CSV export."""

    def test_quotes_and_escapes_values(self):
        rows = [{"name": 'Asha "A" Rao', "phone": "98765", "message": None}]

        csv_text = generate_csv(rows, ["name", "phone", "message"])

        assert csv_text.splitlines() == [
            "name,phone,message",
            '"Asha ""A"" Rao","98765",',
        ]

    def test_datetimes_use_iso_format(self):
        created = datetime(2024, 1, 2, 3, 4, 5)

        csv_text = generate_csv([{"created_at": created}])

        assert csv_text.splitlines()[1] == '"2024-01-02T03:04:05"'

    def test_empty_rows(self):
        assert generate_csv([]) == ""


def test_days_ago_is_in_the_past():
    assert days_ago(7) < datetime.now(timezone.utc)
