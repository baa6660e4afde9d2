"""Core settlement logic: balances and debtor/creditor matching.

Every function here is pure. Inputs are read, never modified, and each call
builds its own intermediate state, so the engine is safe to call from several
threads at once.

The matching is a linear greedy pass over pre-sorted debtors and creditors. It
always produces a valid settlement but does not search for the minimum number
of transactions.
"""

import logging
from collections import defaultdict
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from .exceptions import SettlementMismatchError
from .models import Balance, Participant, SettlementSummary, Transaction
from .money import ZERO, round_amount, to_amount

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = Decimal("0.01")
HALF_CENT = Decimal("0.005")


def compute_total(participants: Sequence[Participant]) -> Decimal:
    """Sum of all contributions."""
    return sum((to_amount(p.amount) for p in participants), ZERO)


def compute_average(participants: Sequence[Participant]) -> Decimal:
    """Fair share per participant (zero for an empty group)."""
    if not participants:
        return ZERO
    return compute_total(participants) / len(participants)


def compute_balances(participants: Sequence[Participant]) -> list[Balance]:
    """
    Compute each participant's balance against the average share.

    Args:
        participants: Group members in input order

    Returns:
        New Balance records, in input order
    """
    average = compute_average(participants)
    balances = []
    for index, participant in enumerate(participants):
        amount = to_amount(participant.amount)
        balances.append(
            Balance(
                name=participant.name,
                amount=amount,
                balance=amount - average,
                index=index,
            )
        )
    return balances


def match_balances(
    balances: Sequence[Balance],
    tolerance: Decimal = DEFAULT_TOLERANCE,
    rounding: str = ROUND_HALF_UP,
) -> list[Transaction]:
    """
    Greedily pair debtors with creditors.

    Steps:
    1. Sort balances descending (ties keep input order)
    2. Split into debtors (balance < 0) and creditors (balance > 0)
    3. Walk both lists with independent cursors, moving min(debt, credit)
       each time and advancing a cursor once its side is within tolerance

    Args:
        balances: Balances as returned by compute_balances (left untouched)
        tolerance: Remaining balance below which a participant is settled
        rounding: decimal rounding mode for transaction amounts

    Returns:
        Transactions in the order they were matched
    """
    if tolerance <= 0:
        raise ValueError(f"Tolerance must be positive, got {tolerance}")

    ordered = sorted(balances, key=lambda b: (-b.balance, b.index))
    working = [b.model_copy() for b in ordered]

    debtors = [b for b in working if b.balance < 0]
    creditors = [b for b in working if b.balance > 0]

    transactions = []
    debtor_idx = 0
    creditor_idx = 0

    while debtor_idx < len(debtors) and creditor_idx < len(creditors):
        debtor = debtors[debtor_idx]
        creditor = creditors[creditor_idx]

        amount = min(abs(debtor.balance), creditor.balance)
        rounded = round_amount(amount, rounding)

        if rounded > 0:
            transactions.append(
                Transaction(from_=debtor.name, to=creditor.name, amount=rounded)
            )
        else:
            logger.debug(
                f"Dropping sub-cent match {debtor.name} -> {creditor.name}: {amount}"
            )

        debtor.balance += amount
        creditor.balance -= amount

        if abs(debtor.balance) < tolerance:
            debtor_idx += 1
        if creditor.balance < tolerance:
            creditor_idx += 1

    return transactions


def settle(
    participants: Sequence[Participant],
    *,
    tolerance: Decimal = DEFAULT_TOLERANCE,
    rounding: str = ROUND_HALF_UP,
) -> list[Transaction]:
    """
    Compute the payments that equalize everyone's contribution.

    An empty group or a group where nobody contributed anything has nothing to
    settle and returns an empty list.

    Args:
        participants: Group members with their contributions
        tolerance: Remaining balance below which a participant is settled
        rounding: decimal rounding mode for transaction amounts

    Returns:
        Transactions (debtor -> creditor), amounts rounded to cents
    """
    if not participants or compute_total(participants) == 0:
        return []

    return match_balances(
        compute_balances(participants), tolerance=tolerance, rounding=rounding
    )


def summarize(
    participants: Sequence[Participant],
    *,
    tolerance: Decimal = DEFAULT_TOLERANCE,
    rounding: str = ROUND_HALF_UP,
) -> SettlementSummary:
    """Compute total, average share, balances and transactions in one pass."""
    total = compute_total(participants)
    balances = compute_balances(participants)

    transactions = []
    if balances and total != 0:
        transactions = match_balances(balances, tolerance=tolerance, rounding=rounding)

    logger.debug(
        f"Settled {len(balances)} participants with {len(transactions)} transactions"
    )

    return SettlementSummary(
        total=total,
        average=compute_average(participants),
        balances=balances,
        transactions=transactions,
        rounding=rounding,
    )


def verify_settlement(
    balances: Sequence[Balance],
    transactions: Sequence[Transaction],
    tolerance: Decimal = DEFAULT_TOLERANCE,
) -> None:
    """
    Check that the transactions actually settle the balances.

    Each creditor must receive its balance and each debtor must pay its debt.
    Matching lets every participant walk away with less than `tolerance` still
    open, and those leftovers can all land on the last counterparty, so the
    allowed residual is `tolerance` per open balance plus half a cent of
    rounding per transaction the participant takes part in. Leftovers above
    `tolerance` but inside that allowance are logged as warnings.

    Raises:
        SettlementMismatchError: On self-payment, non-positive amounts, or a
            participant left unsettled beyond the allowed residual
    """
    received: dict[str, Decimal] = defaultdict(lambda: ZERO)
    touches: dict[str, int] = defaultdict(int)

    for transaction in transactions:
        if transaction.from_ == transaction.to:
            raise SettlementMismatchError(
                f"Transaction pays {transaction.from_} to themselves"
            )
        if transaction.amount <= 0:
            raise SettlementMismatchError(
                f"Transaction {transaction.from_} -> {transaction.to} "
                f"has non-positive amount {transaction.amount}"
            )
        received[transaction.to] += transaction.amount
        received[transaction.from_] -= transaction.amount
        touches[transaction.to] += 1
        touches[transaction.from_] += 1

    open_balances = max(sum(1 for b in balances if b.balance != 0), 1)

    for balance in balances:
        residual = abs(balance.balance - received[balance.name])
        threshold = tolerance * open_balances + HALF_CENT * touches[balance.name]
        if residual > threshold:
            raise SettlementMismatchError(
                f"Settlement mismatch for {balance.name}:\n"
                f"  Balance:   {balance.balance:.4f}\n"
                f"  Moved:     {received[balance.name]:.2f}\n"
                f"  Residual:  {residual:.4f}\n"
                f"  Threshold: {threshold:.4f}"
            )
        if residual >= tolerance:
            logger.warning(
                f"{balance.name} is left with {residual:.4f} unsettled "
                f"after rounding and sub-{tolerance} leftovers"
            )
