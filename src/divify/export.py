"""Plain-text and JSON settlement reports."""

import json
import logging
from pathlib import Path
from typing import Literal

from .exceptions import ExportError
from .models import SettlementSummary
from .money import format_money, round_amount

logger = logging.getLogger(__name__)

ReportFormat = Literal["text", "json"]

SETTLED_MESSAGE = "Everyone is already settled. Nobody needs to pay anything."


def render_text(summary: SettlementSummary) -> str:
    """Render a settlement as a printable plain-text report."""
    rounding = summary.rounding
    lines = [
        "Settlement Summary",
        "==================",
        f"Participants: {summary.participant_count}",
        f"Total: {format_money(summary.total, rounding)}",
        f"Share per person: {format_money(summary.average, rounding)}",
        "",
        "Balances:",
    ]
    for balance in summary.balances:
        lines.append(
            f"  {balance.name}: paid {format_money(balance.amount, rounding)}, "
            f"balance {format_money(balance.balance, rounding)}"
        )

    lines.append("")
    if summary.is_settled:
        lines.append(SETTLED_MESSAGE)
    else:
        lines.append("Transactions:")
        for transaction in summary.transactions:
            lines.append(
                f"  {transaction.from_} pays {transaction.to} "
                f"{format_money(transaction.amount, rounding)}"
            )

    return "\n".join(lines) + "\n"


def render_json(summary: SettlementSummary) -> str:
    """Render a settlement as JSON, with amounts as 2-decimal strings."""
    rounding = summary.rounding
    payload = {
        "total": f"{round_amount(summary.total, rounding):.2f}",
        "average": f"{round_amount(summary.average, rounding):.2f}",
        "balances": [
            {
                "name": balance.name,
                "amount": f"{round_amount(balance.amount, rounding):.2f}",
                "balance": f"{round_amount(balance.balance, rounding):.2f}",
            }
            for balance in summary.balances
        ],
        "transactions": [
            transaction.model_dump(mode="json", by_alias=True)
            for transaction in summary.transactions
        ],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def write_report(
    summary: SettlementSummary, path: Path, fmt: ReportFormat | None = None
) -> Path:
    """
    Write a settlement report to disk.

    Args:
        summary: The settlement to export
        path: Destination file
        fmt: "text" or "json"; inferred from the file suffix when omitted

    Returns:
        The path that was written

    Raises:
        ExportError: If the file can't be written
    """
    if fmt is None:
        fmt = "json" if path.suffix.lower() == ".json" else "text"

    content = render_json(summary) if fmt == "json" else render_text(summary)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ExportError(f"Failed to write report to {path}: {e}") from e

    logger.info(f"Wrote {fmt} report to {path}")
    return path
