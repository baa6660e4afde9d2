"""Pydantic domain models for Divify."""

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .money import to_amount

# ============================================================================
# Input Models
# ============================================================================


class Participant(BaseModel):
    """A person contributing to a shared expense."""

    model_config = ConfigDict(frozen=True)

    name: str
    amount: Decimal = Decimal("0")  # always >= 0 after validation

    @field_validator("amount", mode="before")
    @classmethod
    def sanitize_amount(cls, value):
        return to_amount(value)


# ============================================================================
# Derived Models
# ============================================================================


class Balance(BaseModel):
    """A participant's position relative to the average share.

    Positive balance means the participant is owed money (creditor), negative
    means they owe money (debtor).
    """

    name: str
    amount: Decimal
    balance: Decimal
    index: int  # position in the input, used to break ties


class Transaction(BaseModel):
    """A payment instruction from a debtor to a creditor.

    `from` is a Python keyword, so the field is `from_` with the alias "from"
    used for both input and serialization.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    amount: Decimal = Field(gt=0)  # rounded to cents


class SettlementSummary(BaseModel):
    """Everything computed for one settlement request."""

    total: Decimal
    average: Decimal
    balances: list[Balance] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    rounding: str = ROUND_HALF_UP  # decimal mode used for every displayed amount

    @property
    def participant_count(self) -> int:
        return len(self.balances)

    @property
    def is_settled(self) -> bool:
        """True when nobody needs to pay anybody."""
        return not self.transactions
