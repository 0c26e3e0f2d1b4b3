from datetime import timedelta
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict


BRAND_RESALE_PERCENT = 20
REWARD_WINDOW = timedelta(days=7)
REWARD_WINDOW_SECONDS = int(REWARD_WINDOW.total_seconds())


class EventType(str, Enum):
    MINTED = "MINTED"
    PRIMARY_SALE = "PRIMARY_SALE"
    RESALE = "RESALE"
    REWARD_ASSIGNED = "REWARD_ASSIGNED"
    REWARDS_CLAIMED = "REWARDS_CLAIMED"
    REWARDS_SWEPT = "REWARDS_SWEPT"
    PRICE_UPDATED = "PRICE_UPDATED"


class RewardState(str, Enum):
    CLAIMABLE = "CLAIMABLE"
    EXPIRED = "EXPIRED"


class RewardEntry(BaseModel):
    amount: int = Field(..., ge=0)
    expiry: int

    model_config = ConfigDict(frozen=True)

    def is_claimable(self, now: int) -> bool:
        return self.expiry >= now

    def state(self, now: int) -> RewardState:
        return RewardState.CLAIMABLE if self.is_claimable(now) else RewardState.EXPIRED


class PaymentSplit(BaseModel):
    """Brand/holder division of a single sale payment.

    ``brand_share + holder_count * per_holder + remainder == payment`` always
    holds; ``brand_total`` is what the brand is actually paid.
    """

    payment: int = Field(..., ge=0)
    brand_share: int = Field(..., ge=0)
    holders_share: int = Field(default=0, ge=0)
    per_holder: int = Field(default=0, ge=0)
    remainder: int = Field(default=0, ge=0)
    holder_count: int = Field(default=0, ge=0)

    @property
    def distributed(self) -> int:
        return self.per_holder * self.holder_count

    @property
    def brand_total(self) -> int:
        return self.brand_share + self.remainder


class LedgerEvent(BaseModel):
    type: EventType
    timestamp: int
    data: dict[str, Any] = Field(default_factory=dict)


class MintRequest(BaseModel):
    caller: str = Field(..., description="Account authorizing the mint")
    to: str
    amount: int = Field(..., ge=0)


class BuyRequest(BaseModel):
    buyer: str
    amount: int = Field(..., ge=0)
    paid_value: int = Field(..., ge=0)

    model_config = ConfigDict(json_schema_extra={
        "example": {"buyer": "0xbuyer", "amount": 5, "paid_value": 500}
    })


class ResellRequest(BaseModel):
    seller: str
    buyer: str
    amount: int = Field(..., ge=0)
    paid_value: int = Field(..., ge=0)

    model_config = ConfigDict(json_schema_extra={
        "example": {"seller": "0xseller", "buyer": "0xbuyer", "amount": 10, "paid_value": 1000}
    })


class ClaimRequest(BaseModel):
    caller: str


class SweepRequest(BaseModel):
    start_index: int = Field(..., ge=0)
    end_index: int = Field(..., ge=0)


class AccountSweepRequest(BaseModel):
    accounts: list[str] = Field(..., min_length=1)


class PriceUpdateRequest(BaseModel):
    caller: str
    new_price: int = Field(..., ge=0)


class SaleReceipt(BaseModel):
    buyer: str
    amount: int
    paid_value: int
    brand_paid: int
    total_minted: int


class ResaleReceipt(BaseModel):
    seller: str
    buyer: str
    amount: int
    paid_value: int
    split: PaymentSplit
    brand_paid: int
    rewarded_holders: list[str]
    reward_expiry: Optional[int] = None


class ClaimReceipt(BaseModel):
    holder: str
    amount: int
    remaining_entries: int


class SweepReceipt(BaseModel):
    amount: int
    holders_scanned: int
    message: str


class PendingReward(BaseModel):
    amount: int
    expiry: int
    state: RewardState


class PendingRewardsResponse(BaseModel):
    holder: str
    entries: list[PendingReward]
    count: int
    claimable_amount: int


class HoldersResponse(BaseModel):
    holders: list[str]
    count: int


class CollectibleStatus(BaseModel):
    brand: str
    price_per_unit: int
    max_supply: int
    total_minted: int
    holder_count: int
    brand_revenue: int
    rewards_assigned: int
    rewards_claimed: int
    rewards_swept: int

    @property
    def rewards_outstanding(self) -> int:
        return self.rewards_assigned - self.rewards_claimed - self.rewards_swept
