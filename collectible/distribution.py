"""
Sale payment splitting.

Primary sales go entirely to the brand. Resales send BRAND_RESALE_PERCENT to
the brand and split the rest equally across the holder snapshot taken before
the resale's token transfer; the integer rounding remainder goes to the brand.
"""

import logging
from typing import Sequence

from .errors import InvalidAmountError
from .models import BRAND_RESALE_PERCENT, PaymentSplit

logger = logging.getLogger(__name__)


class DistributionEngine:
    def __init__(self, brand_percent: int = BRAND_RESALE_PERCENT):
        if not 0 <= brand_percent <= 100:
            raise InvalidAmountError(f"Brand percent must be within 0..100, got {brand_percent}")
        self.brand_percent = brand_percent

    def split_primary_sale(self, payment: int) -> PaymentSplit:
        self._check_payment(payment)
        return PaymentSplit(payment=payment, brand_share=payment)

    def split_resale(self, payment: int, holder_count: int) -> PaymentSplit:
        self._check_payment(payment)
        if holder_count < 0:
            raise InvalidAmountError(f"Holder count cannot be negative, got {holder_count}")

        brand_share = payment * self.brand_percent // 100
        holders_share = payment - brand_share

        if holder_count == 0:
            # no tracked holders: the holders' portion falls back to the brand
            logger.warning("Resale of %d with no tracked holders; routing all value to brand", payment)
            return PaymentSplit(
                payment=payment,
                brand_share=brand_share + holders_share,
                holders_share=holders_share,
            )

        per_holder = holders_share // holder_count
        remainder = holders_share - per_holder * holder_count
        split = PaymentSplit(
            payment=payment,
            brand_share=brand_share,
            holders_share=holders_share,
            per_holder=per_holder,
            remainder=remainder,
            holder_count=holder_count,
        )
        assert split.brand_total + split.distributed == payment
        return split

    def assignments(self, split: PaymentSplit, holders: Sequence[str]) -> list[tuple[str, int]]:
        if len(holders) != split.holder_count:
            raise ValueError(
                f"Split computed for {split.holder_count} holders but {len(holders)} supplied"
            )
        return [(holder, split.per_holder) for holder in holders]

    @staticmethod
    def _check_payment(payment: int) -> None:
        if payment < 0:
            raise InvalidAmountError(f"Payment cannot be negative, got {payment}")
