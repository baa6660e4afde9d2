"""Tests for settlement report export."""

import json
from decimal import ROUND_HALF_EVEN

import pytest

from divify.engine import summarize
from divify.exceptions import ExportError
from divify.export import SETTLED_MESSAGE, render_json, render_text, write_report
from divify.models import Participant


@pytest.fixture
def summary():
    """A three-person settlement."""
    return summarize(
        [
            Participant(name="Ana", amount="90"),
            Participant(name="Luis", amount="30"),
            Participant(name="Eva", amount="0"),
        ]
    )


@pytest.fixture
def settled_summary():
    """A group where everyone paid the same."""
    return summarize(
        [Participant(name="Ana", amount="10"), Participant(name="Luis", amount="10")]
    )



def half_cent_summary(**kwargs):
    """A split whose share lands exactly on half a cent."""
    return summarize(
        [Participant(name="A", amount="2.05"), Participant(name="B", amount="0")],
        **kwargs,
    )


class TestRenderText:
    """Tests for the printable report."""

    def test_lists_transactions(self, summary):
        report = render_text(summary)

        assert "Total: $120.00" in report
        assert "Share per person: $40.00" in report
        assert "Luis pays Ana $10.00" in report
        assert "Eva pays Ana $40.00" in report

    def test_shows_balances(self, summary):
        report = render_text(summary)

        assert "Ana: paid $90.00, balance $50.00" in report
        assert "Eva: paid $0.00, balance ($40.00)" in report

    def test_half_cent_rounds_up_everywhere(self):
        """Share, balance and payment agree on the default half-up cent."""
        report = render_text(half_cent_summary())

        assert "Share per person: $1.03" in report
        assert "B: paid $0.00, balance ($1.03)" in report
        assert "B pays A $1.03" in report

    def test_half_cent_follows_half_even(self):
        """Share, balance and payment agree on the half-even cent."""
        report = render_text(half_cent_summary(rounding=ROUND_HALF_EVEN))

        assert "Share per person: $1.02" in report
        assert "B: paid $0.00, balance ($1.02)" in report
        assert "B pays A $1.02" in report

    def test_settled_group(self, settled_summary):
        report = render_text(settled_summary)

        assert SETTLED_MESSAGE in report
        assert "pays" not in report


class TestRenderJson:
    """Tests for the JSON report."""

    def test_uses_from_alias(self, summary):
        payload = json.loads(render_json(summary))

        assert payload["transactions"] == [
            {"from": "Luis", "to": "Ana", "amount": "10.00"},
            {"from": "Eva", "to": "Ana", "amount": "40.00"},
        ]

    def test_totals_as_strings(self, summary):
        payload = json.loads(render_json(summary))

        assert payload["total"] == "120.00"
        assert payload["average"] == "40.00"
        assert payload["balances"][2] == {
            "name": "Eva",
            "amount": "0.00",
            "balance": "-40.00",
        }

    def test_half_even_amounts(self):
        """Amount strings use the summary's rounding mode."""
        payload = json.loads(render_json(half_cent_summary(rounding=ROUND_HALF_EVEN)))

        assert payload["average"] == "1.02"
        assert payload["balances"][1]["balance"] == "-1.02"
        assert payload["transactions"][0]["amount"] == "1.02"

    def test_settled_group_has_no_transactions(self, settled_summary):
        payload = json.loads(render_json(settled_summary))

        assert payload["transactions"] == []


class TestWriteReport:
    """Tests for writing reports to disk."""

    def test_infers_json_from_suffix(self, summary, tmp_path):
        path = write_report(summary, tmp_path / "report.json")

        assert json.loads(path.read_text())["total"] == "120.00"

    def test_defaults_to_text(self, summary, tmp_path):
        path = write_report(summary, tmp_path / "out" / "report.txt")

        assert path.read_text().startswith("Settlement Summary")

    def test_explicit_format_wins(self, summary, tmp_path):
        path = write_report(summary, tmp_path / "report.json", fmt="text")

        assert "Luis pays Ana" in path.read_text()

    def test_unwritable_path(self, summary, tmp_path):
        """Should raise ExportError when the target is a directory."""
        with pytest.raises(ExportError, match="Failed to write report"):
            write_report(summary, tmp_path)
