from dataclasses import dataclass
from typing import Any, Literal, Optional
from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Quote:
    router: str        # router picked by the Lens (bonding curve or DEX)
    amount_out: int    # raw token units, only valid at fetch time


class BuyParams(BaseModel):
    token: str
    amount_in: int = Field(ge=0)          # MON wei, sent as msg.value
    amount_out_min: int = Field(ge=0)
    to: str
    deadline: int = Field(ge=0)


class SellParams(BaseModel):
    token: str
    amount_in: int = Field(ge=0)          # token units pulled by the router
    amount_out_min: int = Field(ge=0)     # 0 = no slippage protection
    to: str
    deadline: int = Field(ge=0)


class GasEstimationParams(BaseModel):
    side: Literal["buy", "sell"]
    token: str
    amount_in: int = Field(ge=0)
    amount_out_min: int = Field(ge=0)
    to: str
    deadline: int = Field(ge=0)


class TradeReceipt(BaseModel):
    tx_hash: str
    status: Optional[int] = None          # 1/0 once mined, None if not waited
    gas_used: Optional[int] = None
    receipt: Optional[dict[str, Any]] = None
