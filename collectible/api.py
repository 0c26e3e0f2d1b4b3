from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, configure_logging
from .errors import (
    CollectibleServiceError,
    UnauthorizedError,
    NoClaimableRewardsError,
    ReentrantCallError,
    TransferFailedError,
)
from .models import (
    MintRequest, BuyRequest, ResellRequest, ClaimRequest, SweepRequest,
    AccountSweepRequest, PriceUpdateRequest, SaleReceipt, ResaleReceipt,
    ClaimReceipt, SweepReceipt, HoldersResponse, PendingRewardsResponse,
    CollectibleStatus,
)
from .service import CollectibleService

settings = Settings.from_env()
configure_logging(settings.log_level)

app = FastAPI(
    title="Collectible Rewards API",
    description="Primary sales, resales and holder reward redistribution for a capped collectible",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

collectible_service = CollectibleService(
    brand=settings.brand,
    price_per_unit=settings.price_per_unit,
    max_supply=settings.max_supply,
    owner=settings.owner,
)


def _to_http(e: CollectibleServiceError) -> HTTPException:
    if isinstance(e, UnauthorizedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    if isinstance(e, (NoClaimableRewardsError, ReentrantCallError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if isinstance(e, TransferFailedError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@app.get("/health", tags=["System"])
def health_check():
    return {"status": "healthy", "service": "collectible-rewards"}


@app.get("/status", response_model=CollectibleStatus, tags=["System"])
def get_status() -> CollectibleStatus:
    return collectible_service.status()


@app.post("/mint", tags=["Sales"])
def mint_initial(request: MintRequest) -> dict:
    try:
        total = collectible_service.mint_initial(request.caller, request.to, request.amount)
    except CollectibleServiceError as e:
        raise _to_http(e)
    return {"to": request.to, "amount": request.amount, "total_minted": total}


@app.post("/buy", response_model=SaleReceipt, status_code=status.HTTP_201_CREATED, tags=["Sales"])
def buy(request: BuyRequest) -> SaleReceipt:
    try:
        return collectible_service.buy(request.buyer, request.amount, request.paid_value)
    except CollectibleServiceError as e:
        raise _to_http(e)


@app.post("/resell", response_model=ResaleReceipt, status_code=status.HTTP_201_CREATED, tags=["Sales"])
def resell(request: ResellRequest) -> ResaleReceipt:
    try:
        return collectible_service.resell(request.seller, request.buyer, request.amount, request.paid_value)
    except CollectibleServiceError as e:
        raise _to_http(e)


@app.put("/price", tags=["Sales"])
def update_price(request: PriceUpdateRequest) -> dict:
    try:
        price = collectible_service.update_price(request.caller, request.new_price)
    except CollectibleServiceError as e:
        raise _to_http(e)
    return {"price_per_unit": price}


@app.post("/rewards/claim", response_model=ClaimReceipt, tags=["Rewards"])
def claim_rewards(request: ClaimRequest) -> ClaimReceipt:
    try:
        return collectible_service.claim_rewards(request.caller)
    except CollectibleServiceError as e:
        raise _to_http(e)


@app.post("/rewards/sweep", response_model=SweepReceipt, tags=["Rewards"])
def sweep_expired_rewards(request: SweepRequest) -> SweepReceipt:
    try:
        return collectible_service.sweep_expired_rewards(request.start_index, request.end_index)
    except CollectibleServiceError as e:
        raise _to_http(e)


@app.post("/rewards/sweep/accounts", response_model=SweepReceipt, tags=["Rewards"])
def sweep_expired_rewards_for(request: AccountSweepRequest) -> SweepReceipt:
    try:
        return collectible_service.sweep_expired_rewards_for(request.accounts)
    except CollectibleServiceError as e:
        raise _to_http(e)


@app.get("/holders", response_model=HoldersResponse, tags=["Holders"])
def list_holders() -> HoldersResponse:
    return collectible_service.holders()


@app.get("/holders/{holder}/rewards", response_model=PendingRewardsResponse, tags=["Holders"])
def get_pending_rewards(holder: str) -> PendingRewardsResponse:
    return collectible_service.pending_rewards(holder)


@app.get("/holders/{holder}/rewards/count", tags=["Holders"])
def get_pending_reward_count(holder: str) -> dict:
    return {"holder": holder, "count": collectible_service.pending_reward_count(holder)}


@app.get("/holders/{holder}/balance", tags=["Holders"])
def get_balance(holder: str) -> dict:
    return {"holder": holder, "balance": collectible_service.balance_of(holder)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
