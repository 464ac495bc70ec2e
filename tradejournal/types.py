"""
Shared data structures for the trade journal.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["Category", "Side", "Trade", "TradeDraft", "ALL_CATEGORIES"]

ALL_CATEGORIES = "All"


class Category(str, Enum):
    """Coarse asset-class label derived from a symbol."""

    GOLD = "Gold"
    OIL = "Oil"
    CRYPTO = "Crypto"
    FOREX = "Forex"
    OTHER = "Other"


class Side(str, Enum):
    LONG = "long"
    SHORT = "short"


class Trade(BaseModel):
    """
    A single journal entry.

    `pl` is computed once by the store at insertion and stored with the
    trade; it is never recomputed from the other fields.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., alias="_id", description="Opaque unique identifier.")
    date: str = Field("", description="Trade date, YYYY-MM-DD.")
    time: str = Field("", description="Time of day, HH:MM.")
    symbol: str = Field(..., description="Upper-cased instrument symbol.")
    side: Side = Field(Side.LONG, description="Long or short.")
    entry: float = Field(..., allow_inf_nan=False, description="Entry price.")
    exit: float = Field(..., allow_inf_nan=False, description="Exit price.")
    lot: float = Field(1.0, gt=0, description="Position size multiplier.")
    contract: float = Field(1.0, gt=0, description="Contract size multiplier.")
    notes: str = Field("", description="Free text notes.")
    screenshot: str = Field("", description="Embedded image as a data URI.")
    pl: Optional[float] = Field(None, description="Signed profit/loss, 2 decimals.")

    def to_record(self) -> dict:
        """Serializable form used by the persisted journal."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass
class TradeDraft:
    """Raw, unvalidated user input for a trade that has not been inserted yet."""

    symbol: Optional[str] = None
    entry: Optional[float] = None
    exit: Optional[float] = None
    side: str = "long"
    lot: Optional[float] = None
    contract: Optional[float] = None
    date: Optional[str] = None
    time: Optional[str] = None
    notes: str = ""
    screenshot: str = ""
