"""
Collectible Sale & Resale Reward Ledger

This module provides:
- Primary sales paid entirely to the brand
- Resales split 20% brand / 80% equally across current holders
- Pending holder rewards that expire after 7 days
- Claims by holders, sweeps of expired rewards back to the brand
- All-or-nothing operations guarded against reentrant calls
"""

from .errors import CollectibleServiceError
from .models import (
    EventType,
    RewardState,
    RewardEntry,
    PaymentSplit,
    LedgerEvent,
)
from .distribution import DistributionEngine
from .registry import HolderRegistry
from .rewards import RewardLedger
from .processors import ClaimProcessor, SweepProcessor
from .service import CollectibleService

__all__ = [
    "CollectibleServiceError",
    "EventType",
    "RewardState",
    "RewardEntry",
    "PaymentSplit",
    "LedgerEvent",
    "DistributionEngine",
    "HolderRegistry",
    "RewardLedger",
    "ClaimProcessor",
    "SweepProcessor",
    "CollectibleService",
]
