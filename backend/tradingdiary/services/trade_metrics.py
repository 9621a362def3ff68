"""Derived financial metrics of a journal trade.

The write path calls :func:`apply_trade_metrics` right before a trade is
flushed, on creation as well as on every update. The computation is total:
it never raises and never performs I/O. A trade without an exit price is
still open and keeps whatever derived values it already had.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

logger = logging.getLogger(__name__)

BUY = "buy"
SELL = "sell"

_TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class TradeInputs:
    type: Optional[str]
    quantity: Optional[float]
    entry_price: Optional[float]
    exit_price: Optional[float]
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    fees: Optional[float] = None

    @classmethod
    def from_record(cls, record: Any) -> "TradeInputs":
        return cls(
            type=getattr(record, "type", None),
            quantity=getattr(record, "quantity", None),
            entry_price=getattr(record, "entry_price", None),
            exit_price=getattr(record, "exit_price", None),
            stop_loss=getattr(record, "stop_loss", None),
            take_profit=getattr(record, "take_profit", None),
            fees=getattr(record, "fees", None),
        )

    @property
    def is_closed(self) -> bool:
        return None not in (self.type, self.quantity, self.entry_price, self.exit_price)


@dataclass(frozen=True)
class TradeMetrics:
    pl: float
    planned_rr: float
    actual_rr: float
    returns: float


def round_half_up(value: float, places: Decimal = _TWO_PLACES) -> float:
    if not math.isfinite(value):
        return value
    # Going through repr() keeps 2.675 at 2.68 instead of the binary 2.67499...
    return float(Decimal(repr(value)).quantize(places, rounding=ROUND_HALF_UP))


def _price_move(trade_type: str, entry: float, exit_: float) -> float:
    """Favourable price distance for the side of the trade."""
    if trade_type == BUY:
        return exit_ - entry
    if trade_type == SELL:
        return entry - exit_
    return 0.0


def _ratio(reward: float, risk: float) -> float:
    return reward / risk if risk > 0 else 0.0


def profit_loss(inputs: TradeInputs) -> float:
    gross = _price_move(inputs.type, inputs.entry_price, inputs.exit_price) * inputs.quantity
    return gross - (inputs.fees or 0.0)


def planned_risk_reward(inputs: TradeInputs) -> float:
    if inputs.stop_loss is None or inputs.take_profit is None:
        return 0.0
    risk = abs(inputs.entry_price - inputs.stop_loss)
    reward = abs(inputs.take_profit - inputs.entry_price)
    return _ratio(reward, risk)


def actual_risk_reward(inputs: TradeInputs) -> float:
    if inputs.stop_loss is None:
        return 0.0
    risk = abs(inputs.entry_price - inputs.stop_loss)
    reward = abs(inputs.exit_price - inputs.entry_price)
    return _ratio(reward, risk)


def return_percent(inputs: TradeInputs) -> float:
    if inputs.entry_price == 0:
        logger.warning("Entry price is zero, returns reported as 0 for %s trade", inputs.type)
        return 0.0
    move = _price_move(inputs.type, inputs.entry_price, inputs.exit_price)
    return round_half_up(move / inputs.entry_price * 100)


def compute_trade_metrics(inputs: TradeInputs) -> TradeMetrics | None:
    """Compute P/L, planned and actual risk-reward and percentage return.

    Returns ``None`` when the trade is still open (any of entry price, exit
    price, quantity or side missing); callers must then leave the stored
    derived fields untouched.
    """

    if not inputs.is_closed:
        return None

    return TradeMetrics(
        pl=profit_loss(inputs),
        planned_rr=planned_risk_reward(inputs),
        actual_rr=actual_risk_reward(inputs),
        returns=return_percent(inputs),
    )


def apply_trade_metrics(trade: Any) -> TradeMetrics | None:
    """Recompute the derived fields of ``trade`` in place."""

    metrics = compute_trade_metrics(TradeInputs.from_record(trade))
    if metrics is None:
        return None

    trade.pl = metrics.pl
    trade.planned_rr = metrics.planned_rr
    trade.actual_rr = metrics.actual_rr
    trade.returns = metrics.returns
    return metrics


__all__ = [
    "BUY",
    "SELL",
    "TradeInputs",
    "TradeMetrics",
    "apply_trade_metrics",
    "compute_trade_metrics",
    "round_half_up",
]
