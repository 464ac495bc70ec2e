"""
Instrument classification and profit/loss pricing.

The classifier and the P/L calculator each detect the instrument kind from
the symbol with their own rule list, and the lists differ: `XRP` and `SOL`
are labelled Crypto by `classify` but are priced by whichever later pricing
rule matches (Forex pips for six-letter `...USD` pairs, the plain price
difference otherwise). Stored trades keep their `pl` across rule changes
while their category always follows the current classifier.
"""
import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, Optional, Tuple, Union

from tradejournal.types import Category, Side

__all__ = ["as_finite", "classify", "compute_pl", "pricing_kind", "stop_loss_risk"]

_SIX_LETTERS = re.compile(r"[A-Z]{6}")

_CLASSIFIER_RULES: Tuple[Tuple[Category, Tuple[str, ...]], ...] = (
    (Category.GOLD, ("XAU",)),
    (Category.OIL, ("XTI", "OIL", "USOIL")),
    (Category.CRYPTO, ("BTC", "ETH", "XRP", "SOL")),
)

_PRICING_RULES: Tuple[Tuple[Category, Tuple[str, ...]], ...] = (
    (Category.GOLD, ("XAU",)),
    (Category.OIL, ("XTI", "OIL", "USOIL")),
    (Category.CRYPTO, ("BTC", "ETH")),
)

GOLD_CONTRACT_UNITS = 100
OIL_TICK = 0.01
FOREX_PIP = 0.0001
FOREX_PIP_VALUE = 10

_FORMULAS: Dict[Category, Callable[[float], float]] = {
    Category.GOLD: lambda move: move * GOLD_CONTRACT_UNITS,
    Category.OIL: lambda move: move / OIL_TICK,
    Category.CRYPTO: lambda move: move,
    Category.FOREX: lambda move: (move / FOREX_PIP) * FOREX_PIP_VALUE,
    Category.OTHER: lambda move: move,
}

Number = Union[int, float, str, None]

CENT = Decimal("0.01")


def _is_forex_pair(symbol: str) -> bool:
    return bool(_SIX_LETTERS.search(symbol)) and symbol.endswith("USD")


def _match(symbol: Optional[str], rules: Tuple[Tuple[Category, Tuple[str, ...]], ...]) -> Category:
    sym = (symbol or "").upper()
    if not sym:
        return Category.OTHER
    for category, needles in rules:
        if any(needle in sym for needle in needles):
            return category
    if _is_forex_pair(sym):
        return Category.FOREX
    return Category.OTHER


def classify(symbol: Optional[str]) -> Category:
    """Maps a symbol to its display category. Never raises."""
    return _match(symbol, _CLASSIFIER_RULES)


def pricing_kind(symbol: Optional[str]) -> Category:
    """The instrument kind the P/L calculator prices `symbol` as."""
    return _match(symbol, _PRICING_RULES)


def as_finite(value: Number) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def compute_pl(
    symbol: Optional[str],
    entry: Number,
    exit: Number,
    lot: Number,
    contract: Number = 1,
    side: Union[Side, str] = Side.LONG,
) -> Optional[float]:
    """
    Signed profit/loss of a closed trade, rounded to 2 decimals.

    Returns None when entry, exit or lot is missing or not a finite number;
    callers must not persist a trade in that case.
    """
    entry_f, exit_f, lot_f = as_finite(entry), as_finite(exit), as_finite(lot)
    if entry_f is None or exit_f is None or lot_f is None:
        return None
    contract_f = as_finite(contract)
    if contract_f is None:
        contract_f = 1.0

    formula = _FORMULAS[pricing_kind(symbol)]
    pl = formula(exit_f - entry_f) * lot_f * contract_f
    if Side(side) is Side.SHORT:
        pl = -pl
    # Ties on the exact binary value round away from zero.
    return float(Decimal(pl).quantize(CENT, rounding=ROUND_HALF_UP))


def stop_loss_risk(
    symbol: Optional[str],
    entry: Number,
    stop: Number,
    lot: Number,
    contract: Number = 1,
    side: Union[Side, str] = Side.LONG,
) -> Optional[float]:
    """P/L the trade would realise if it were closed at its stop-loss."""
    return compute_pl(symbol, entry, stop, lot, contract, side)
