"""Divify - Split shared expenses fairly among a group."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .engine import compute_balances, settle, summarize, verify_settlement
from .models import Balance, Participant, SettlementSummary, Transaction
from .service import SettlementService

__all__ = [
    "Settings",
    "load_settings",
    "compute_balances",
    "settle",
    "summarize",
    "verify_settlement",
    "Balance",
    "Participant",
    "SettlementSummary",
    "Transaction",
    "SettlementService",
]
