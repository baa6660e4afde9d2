"""Service layer between raw group input and the settlement engine.

Turns loosely typed entries (names and whatever the user typed as an amount)
into a clean participant list, and runs the engine with the configured
tolerance and rounding mode.
"""

import logging
from collections.abc import Iterable, Sequence

from .config import Settings
from .engine import summarize, verify_settlement
from .exceptions import DuplicateParticipantError, InvalidParticipantError
from .models import Participant, SettlementSummary
from .money import format_money, parse_rounding

logger = logging.getLogger(__name__)

ENTRY_SEPARATORS = ("=", ":")


class SettlementService:
    """Service for building participant groups and settling them."""

    def __init__(self, settings: Settings):
        """Initialize the settlement service."""
        self.settings = settings
        self.rounding = parse_rounding(settings.rounding)

    def default_name(self, index: int) -> str:
        """Default display name for the participant at a 0-based position."""
        return self.settings.default_name_template.format(n=index + 1)

    def parse_entry(self, text: str) -> tuple[str, str]:
        """
        Split a "Name=Amount" entry into its parts.

        "Name:Amount" is accepted too, and a bare name means no contribution.
        The amount is returned raw; sanitizing happens in build_participants.

        Raises:
            InvalidParticipantError: If the entry is empty
        """
        text = text.strip()
        if not text:
            raise InvalidParticipantError("Empty participant entry")

        for separator in ENTRY_SEPARATORS:
            if separator in text:
                name, _, amount = text.rpartition(separator)
                return name.strip(), amount.strip()

        return text, ""

    def build_participants(
        self, entries: Iterable[tuple[str, object]]
    ) -> list[Participant]:
        """
        Build a validated participant list from (name, raw_amount) pairs.

        Blank names get the default name for their position. Amounts are
        sanitized by the Participant model (invalid or negative become 0).

        Raises:
            DuplicateParticipantError: If two participants share a name
        """
        participants = []
        seen: set[str] = set()

        for index, (name, raw_amount) in enumerate(entries):
            name = (name or "").strip() or self.default_name(index)

            key = name.casefold()
            if key in seen:
                raise DuplicateParticipantError(name)
            seen.add(key)

            participants.append(Participant(name=name, amount=raw_amount))

        return participants

    def parse_participants(self, texts: Iterable[str]) -> list[Participant]:
        """Build participants from "Name=Amount" command-line style entries."""
        return self.build_participants(self.parse_entry(text) for text in texts)

    def resize(
        self, participants: Sequence[Participant], count: int
    ) -> list[Participant]:
        """
        Resize the group to exactly `count` participants.

        Existing participants are kept in order (extra ones are dropped) and new
        slots are filled with default-named participants who contributed nothing.

        Raises:
            InvalidParticipantError: If count is below the configured minimum
        """
        if count < self.settings.min_participants:
            raise InvalidParticipantError(
                f"A group needs at least {self.settings.min_participants} "
                f"participants, got {count}"
            )

        resized = list(participants[:count])
        taken = {p.name.casefold() for p in resized}

        for index in range(len(resized), count):
            name = self.default_name(index)
            if name.casefold() in taken:
                raise DuplicateParticipantError(name)
            taken.add(name.casefold())
            resized.append(Participant(name=name))

        return resized

    def default_group(self) -> list[Participant]:
        """A fresh group of the configured default size."""
        return self.resize([], self.settings.default_participant_count)

    def settle(self, participants: Sequence[Participant]) -> SettlementSummary:
        """
        Settle a participant group.

        Args:
            participants: Validated group members

        Returns:
            Summary with total, average share, balances and transactions

        Raises:
            SettlementMismatchError: If the transactions don't cover the balances
        """
        summary = summarize(
            participants,
            tolerance=self.settings.settle_tolerance,
            rounding=self.rounding,
        )
        verify_settlement(
            summary.balances,
            summary.transactions,
            tolerance=self.settings.settle_tolerance,
        )

        if summary.is_settled:
            logger.info(
                f"Nothing to settle for {summary.participant_count} participants "
                f"(total: {format_money(summary.total, self.rounding)})"
            )
        else:
            logger.info(
                f"Settled {summary.participant_count} participants with "
                f"{len(summary.transactions)} transactions "
                f"(total: {format_money(summary.total, self.rounding)}, "
                f"share: {format_money(summary.average, self.rounding)})"
            )

        return summary
