"""
The trade store: the single owner of the journal's trade list.

The full list is loaded once from a key-value storage backend and every
mutation rewrites the whole list under the same key.
"""
import json
import logging
import uuid
from datetime import datetime
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from tradejournal.adapters.storage import KeyValueStorage
from tradejournal.instruments import as_finite, compute_pl
from tradejournal.types import Side, Trade, TradeDraft

__all__ = ["TradeStore", "TradeValidationError", "DEFAULT_STORAGE_KEY"]

log = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tj_ftmo_v1"
MISSING_FIELDS_MESSAGE = "Please fill Symbol, Entry, and Exit before saving!"
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


class TradeValidationError(ValueError):
    """Raised when a draft cannot become a trade. Nothing is persisted."""


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def _has_identity(item: Any) -> bool:
    """A record is usable only if it carries both an id and a symbol."""
    if isinstance(item, Trade):
        return bool(item.id) and bool(item.symbol)
    if isinstance(item, dict):
        return bool(item.get("_id") or item.get("id")) and bool(item.get("symbol"))
    return False


def _stamp(value: Optional[str], fmt: str, default: datetime, name: str) -> str:
    """Normalizes a typed date or time to `fmt`; blank means `default`."""
    if not value:
        return default.strftime(fmt)
    try:
        return datetime.strptime(value.strip(), fmt).strftime(fmt)
    except ValueError:
        raise TradeValidationError(f"{name} {value!r} does not match {fmt}") from None


def _multiplier(value: Any, name: str) -> float:
    """Missing, zero and non-numeric multipliers default to 1."""
    number = as_finite(value)
    if not number:
        return 1.0
    if number < 0:
        raise TradeValidationError(f"{name} must be positive, got {number}")
    return number


class TradeStore:
    """
    Ordered, newest-first collection of trades persisted to one storage key.

    Args:
        storage: Backend implementing `get`/`set` on string keys.
        key: The storage key holding the serialized trade list.
        clock: Returns "now"; used for date/time defaults.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_STORAGE_KEY,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock = clock
        self._trades: List[Trade] = []

    def __len__(self) -> int:
        return len(self._trades)

    # impure
    def load(self) -> List[Trade]:
        """
        Replaces the working set with the persisted list.
        Unusable records are skipped but left in storage until the next write.
        #impure: Reads from storage.
        """
        raw = self._storage.get(self._key)
        records: Any = []
        if raw:
            try:
                records = json.loads(raw)
            except json.JSONDecodeError as e:
                log.warning(f"Stored journal under '{self._key}' is corrupted, starting empty: {e}")
                records = []
        if not isinstance(records, list):
            log.warning(f"Stored journal under '{self._key}' is not a list, starting empty.")
            records = []

        trades: List[Trade] = []
        for record in records:
            if not _has_identity(record):
                log.debug(f"Skipping stored record without id or symbol: {record!r:.80}")
                continue
            try:
                trades.append(Trade.model_validate(record))
            except ValidationError as e:
                log.warning(f"Skipping unreadable stored trade {record.get('_id') or record.get('id')}: {e}")

        dropped = len(records) - len(trades)
        if dropped:
            log.info(f"Loaded {len(trades)} trades, ignored {dropped} invalid records.")
        self._trades = trades
        return self.snapshot()

    def snapshot(self) -> List[Trade]:
        """The current trades, newest first. Returned list is a copy."""
        return [t for t in self._trades if _has_identity(t)]

    def get(self, trade_id: str) -> Optional[Trade]:
        return next((t for t in self._trades if t.id == trade_id), None)

    def build(self, draft: TradeDraft) -> Trade:
        """
        Validates a draft and turns it into a priced trade without storing it.
        Raises TradeValidationError on missing or invalid input.
        """
        symbol = (draft.symbol or "").strip().upper()
        entry = as_finite(draft.entry)
        exit_ = as_finite(draft.exit)
        if not symbol or entry is None or exit_ is None:
            raise TradeValidationError(MISSING_FIELDS_MESSAGE)

        try:
            side = Side((draft.side or Side.LONG.value).lower())
        except ValueError:
            raise TradeValidationError(f"Side must be 'long' or 'short', got {draft.side!r}") from None
        lot = _multiplier(draft.lot, "Lot")
        contract = _multiplier(draft.contract, "Contract")

        pl = compute_pl(symbol, entry, exit_, lot, contract, side)
        if pl is None:
            raise TradeValidationError(MISSING_FIELDS_MESSAGE)

        existing = {t.id for t in self._trades}
        trade_id = _new_id()
        while trade_id in existing:
            trade_id = _new_id()

        now = self._clock()
        trade_date = _stamp(draft.date, DATE_FORMAT, now, "Date")
        trade_time = _stamp(draft.time, TIME_FORMAT, now, "Time")
        try:
            return Trade(
                id=trade_id,
                date=trade_date,
                time=trade_time,
                symbol=symbol,
                side=side,
                entry=entry,
                exit=exit_,
                lot=lot,
                contract=contract,
                notes=draft.notes or "",
                screenshot=draft.screenshot or "",
                pl=pl,
            )
        except ValidationError as e:
            raise TradeValidationError(str(e)) from e

    # impure
    def insert(self, draft: TradeDraft) -> Trade:
        """
        Validates, prices and prepends a new trade, then persists the list.
        #impure: Writes to storage.
        """
        trade = self.build(draft)
        self._trades.insert(0, trade)
        self._persist()
        log.info(f"Saved trade {trade.id} {trade.symbol} {trade.side.value} P/L {trade.pl}")
        return trade

    # impure
    def remove(self, trade_id: str) -> bool:
        """
        Deletes the trade with `trade_id` if present; the list is rewritten either way.
        #impure: Writes to storage.
        """
        before = len(self._trades)
        self._trades = [t for t in self._trades if t.id != trade_id]
        removed = len(self._trades) != before
        self._persist()
        if removed:
            log.info(f"Removed trade {trade_id}")
        else:
            log.debug(f"No trade with id {trade_id}; nothing removed")
        return removed

    def _persist(self) -> None:
        payload = json.dumps([t.to_record() for t in self._trades])
        self._storage.set(self._key, payload)
