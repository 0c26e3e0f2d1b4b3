"""
Claim and sweep processors.

Both extract entries from the RewardLedger first and push value second, so the
ledger is final before a recipient gets control. Neither undoes its own
extraction on a failed push: they run inside the service transaction, which
restores the ledger when TransferFailedError propagates.
"""

import logging
from typing import Iterable

from .collaborators import PaymentGateway
from .errors import NoClaimableRewardsError, TransferFailedError
from .registry import HolderRegistry
from .rewards import RewardLedger

logger = logging.getLogger(__name__)


class ClaimProcessor:
    def __init__(self, rewards: RewardLedger, payments: PaymentGateway):
        self.rewards = rewards
        self.payments = payments

    def claim(self, caller: str, now: int) -> int:
        total = self.rewards.claim_unexpired(caller, now)
        if total == 0:
            raise NoClaimableRewardsError(f"No claimable rewards for {caller}")
        if not self.payments.send(caller, total):
            raise TransferFailedError(f"Reward payout of {total} to {caller} failed")
        logger.info("Paid %d in claimed rewards to %s", total, caller)
        return total


class SweepProcessor:
    def __init__(self, rewards: RewardLedger, registry: HolderRegistry,
                 payments: PaymentGateway, brand: str):
        self.rewards = rewards
        self.registry = registry
        self.payments = payments
        self.brand = brand

    def sweep(self, start: int, end: int, now: int) -> int:
        total = self.rewards.sweep_expired(self.registry, start, end, now)
        return self._pay_brand(total)

    def sweep_accounts(self, accounts: Iterable[str], now: int) -> int:
        total = self.rewards.sweep_expired_accounts(accounts, now)
        return self._pay_brand(total)

    def _pay_brand(self, total: int) -> int:
        if total == 0:
            return 0
        if not self.payments.send(self.brand, total):
            raise TransferFailedError(f"Sweep payout of {total} to brand {self.brand} failed")
        logger.info("Swept %d in expired rewards to brand %s", total, self.brand)
        return total
