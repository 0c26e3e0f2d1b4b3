import logging
import os
import sys
from typing import Optional

from pydantic import BaseModel, Field


class Settings(BaseModel):
    brand: str = "brand"
    owner: Optional[str] = None
    price_per_unit: int = Field(default=100, gt=0)
    max_supply: int = Field(default=1000, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            brand=os.getenv("COLLECTIBLE_BRAND", "brand"),
            owner=os.getenv("COLLECTIBLE_OWNER") or None,
            price_per_unit=int(os.getenv("COLLECTIBLE_PRICE", "100")),
            max_supply=int(os.getenv("COLLECTIBLE_MAX_SUPPLY", "1000")),
            log_level=os.getenv("COLLECTIBLE_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root = logging.getLogger("collectible")
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
