"""MCP server for Divify — exposes group settlement as tools for an assistant."""

import logging
from dataclasses import dataclass, field

from mcp.server.fastmcp import FastMCP

from .config import load_settings
from .exceptions import DivifyError
from .export import render_text
from .models import Participant
from .money import format_money
from .service import SettlementService

logger = logging.getLogger(__name__)

mcp_app = FastMCP("divify")

# ---------------------------------------------------------------------------
# Session state — one MCP server process = one conversation
# ---------------------------------------------------------------------------

WORKFLOW_INSTRUCTIONS = """\
You are helping a group split shared expenses evenly. Follow this workflow:

1. SIZE: Call set_participant_count with the number of people in the group.

2. FILL: For each person, call update_participant with their index, name and
   the amount they paid. Amounts that aren't numbers count as 0.

3. REVIEW: Call list_participants and confirm the group with the user.

4. SETTLE: Call settle_group and show the user who pays whom. If nobody needs
   to pay anything, tell them everyone is already settled.

For a quick one-off question ("Ana paid 30, Luis paid 10"), call
settle_expenses directly with entries like "Ana=30" instead.\
"""


@dataclass
class SessionState:
    """Holds the group being edited between MCP tool calls."""

    service: SettlementService | None = None
    participants: list[Participant] = field(default_factory=list)


_state = SessionState()


def _ensure_service() -> SettlementService:
    """Lazily initialize the SettlementService (loads .env config)."""
    if _state.service is None:
        _state.service = SettlementService(load_settings())
    return _state.service


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _format_group(participants: list[Participant], rounding: str) -> str:
    lines = [f"Group ({len(participants)} people):"]
    for i, participant in enumerate(participants):
        amount = format_money(participant.amount, rounding)
        lines.append(f"  [{i}] {participant.name} | {amount}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# MCP Tools
# ---------------------------------------------------------------------------


@mcp_app.tool()
def set_participant_count(count: int) -> str:
    """Resize the group, keeping existing people and adding blank ones.

    Args:
        count: Number of people in the group.
    """
    try:
        service = _ensure_service()
        _state.participants = service.resize(_state.participants, count)
        return _format_group(_state.participants, service.rounding)
    except DivifyError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to resize group: {e}"


@mcp_app.tool()
def update_participant(
    index: int, name: str | None = None, amount: str | None = None
) -> str:
    """Change a person's name and/or the amount they paid.

    Args:
        index: Position in the group from list_participants.
        name: New name (unchanged if omitted).
        amount: Amount paid (unchanged if omitted; non-numbers count as 0).
    """
    try:
        service = _ensure_service()
        if not _state.participants:
            return "Error: The group is empty. Call set_participant_count first."
        if index < 0 or index >= len(_state.participants):
            return (
                f"Error: Invalid index {index}. "
                f"Valid range: 0–{len(_state.participants) - 1}"
            )

        entries: list[tuple[str, object]] = [
            (p.name, p.amount) for p in _state.participants
        ]
        current_name, current_amount = entries[index]
        entries[index] = (
            name if name is not None else current_name,
            amount if amount is not None else current_amount,
        )

        _state.participants = service.build_participants(entries)
        return _format_group(_state.participants, service.rounding)
    except DivifyError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to update participant: {e}"


@mcp_app.tool()
def list_participants() -> str:
    """Show the current group with what each person paid."""
    if not _state.participants:
        return "The group is empty. Call set_participant_count first."
    return _format_group(_state.participants, _ensure_service().rounding)


@mcp_app.tool()
def reset_group() -> str:
    """Start over with a blank group of the default size."""
    try:
        service = _ensure_service()
        _state.participants = service.default_group()
        return _format_group(_state.participants, service.rounding)
    except DivifyError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to reset group: {e}"


@mcp_app.tool()
def settle_group() -> str:
    """Work out who pays whom for the current group."""
    try:
        service = _ensure_service()
        if not _state.participants:
            return "Error: The group is empty. Call set_participant_count first."

        summary = service.settle(_state.participants)
        return render_text(summary)
    except DivifyError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to settle group: {e}"


@mcp_app.tool()
def settle_expenses(entries: list[str]) -> str:
    """Settle a group in one call without touching the current group.

    Args:
        entries: One "Name=Amount" string per person, e.g. ["Ana=30", "Luis=10"].
    """
    try:
        service = _ensure_service()
        participants = service.parse_participants(entries)
        if not participants:
            return "Error: No participants given."

        summary = service.settle(participants)
        return render_text(summary)
    except DivifyError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to settle expenses: {e}"


# ---------------------------------------------------------------------------
# MCP Prompt
# ---------------------------------------------------------------------------


@mcp_app.prompt()
def settle_workflow() -> str:
    """Instructions for settling a group's shared expenses."""
    return WORKFLOW_INSTRUCTIONS


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run_server():
    """Start the MCP server (stdio transport)."""
    mcp_app.run(transport="stdio")
