"""Interactive UI components for entering a participant group."""

import logging

from prompt_toolkit import PromptSession

from .exceptions import DuplicateParticipantError
from .models import Participant
from .money import format_money, to_amount
from .service import SettlementService

logger = logging.getLogger(__name__)


def prompt_participant_count(
    session: PromptSession[str], minimum: int, default: int
) -> int:
    """Ask for the group size until a valid number is entered."""
    while True:
        response = session.prompt(
            f"Number of people [{default}]: ", default=""
        ).strip() or str(default)

        try:
            count = int(response)
        except ValueError:
            print(f"❌ '{response}' is not a whole number.")
            continue

        if count < minimum:
            print(f"❌ A group needs at least {minimum} people.")
            continue

        return count


def collect_participants_interactive(
    service: SettlementService,
    session: PromptSession[str] | None = None,
) -> list[Participant] | None:
    """
    Interactive group entry: size first, then a name and amount per person.

    An empty name keeps the default name, and anything that isn't a number is
    read as no contribution, so every prompt accepts whatever is typed.

    Args:
        service: Service used for default names and group validation
        session: Optional prompt session (a fresh one is created otherwise)

    Returns:
        The entered participants, or None if the user cancelled
    """
    if session is None:
        session = PromptSession()

    print("\n👥 Enter the group")
    print("   Press Enter to keep defaults, Ctrl+C to cancel\n")

    try:
        count = prompt_participant_count(
            session,
            minimum=service.settings.min_participants,
            default=service.settings.default_participant_count,
        )

        entries: list[tuple[str, object]] = []
        for index in range(count):
            default_name = service.default_name(index)
            name = session.prompt(
                f"Name #{index + 1}: ", default=default_name
            ).strip()
            raw_amount = session.prompt(f"Amount paid by {name or default_name}: ")

            amount = format_money(to_amount(raw_amount), service.rounding)
            print(f"   → {name or default_name}: {amount}")
            entries.append((name, raw_amount))

        while True:
            try:
                participants = service.build_participants(entries)
            except DuplicateParticipantError as e:
                # Ask again only for the clashing name
                print(f"❌ {e}")
                index = _find_duplicate(entries, service)
                new_name = session.prompt(f"New name for #{index + 1}: ").strip()
                entries[index] = (new_name, entries[index][1])
                continue

            logger.info(f"Collected {len(participants)} participants interactively")
            return participants

    except KeyboardInterrupt:
        print("\n⏭️  Cancelled")
        return None
    except EOFError:
        return None


def _find_duplicate(
    entries: list[tuple[str, object]], service: SettlementService
) -> int:
    """Index of the first entry whose name was already used earlier."""
    seen = set()
    for index, (name, _amount) in enumerate(entries):
        key = (name.strip() or service.default_name(index)).casefold()
        if key in seen:
            return index
        seen.add(key)
    return len(entries) - 1
