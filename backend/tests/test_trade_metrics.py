from __future__ import annotations

import logging
import math
from types import SimpleNamespace

import pytest

from tradingdiary.services.trade_metrics import (
    TradeInputs,
    TradeMetrics,
    apply_trade_metrics,
    compute_trade_metrics,
    round_half_up,
)


def _inputs(**overrides) -> TradeInputs:
    values = {
        "type": "buy",
        "quantity": 10.0,
        "entry_price": 100.0,
        "exit_price": 120.0,
        "stop_loss": None,
        "take_profit": None,
        "fees": 5.0,
    }
    values.update(overrides)
    return TradeInputs(**values)


def test_buy_and_sell_pl_are_mirrored_around_fees():
    buy = compute_trade_metrics(_inputs(type="buy"))
    sell = compute_trade_metrics(_inputs(type="sell"))

    assert buy.pl == 195.0
    assert sell.pl == -205.0


def test_missing_fees_count_as_zero():
    metrics = compute_trade_metrics(_inputs(fees=None))
    assert metrics.pl == 200.0


def test_zero_risk_planned_rr_is_zero():
    metrics = compute_trade_metrics(_inputs(stop_loss=100.0, take_profit=150.0))

    assert metrics.planned_rr == 0.0
    assert metrics.actual_rr == 0.0
    assert math.isfinite(metrics.planned_rr)


def test_missing_stop_and_target_give_zero_ratios():
    metrics = compute_trade_metrics(_inputs(stop_loss=None, take_profit=None))

    assert metrics.planned_rr == 0.0
    assert metrics.actual_rr == 0.0


def test_actual_rr_only_needs_stop_loss():
    metrics = compute_trade_metrics(_inputs(stop_loss=95.0, take_profit=None))

    assert metrics.planned_rr == 0.0
    assert metrics.actual_rr == pytest.approx(4.0)


def test_risk_reward_ratios():
    metrics = compute_trade_metrics(_inputs(stop_loss=90.0, take_profit=130.0, exit_price=115.0))

    assert metrics.planned_rr == pytest.approx(3.0)
    assert metrics.actual_rr == pytest.approx(1.5)


def test_sell_trade_risk_reward_uses_distances():
    metrics = compute_trade_metrics(
        _inputs(type="sell", entry_price=50.0, exit_price=45.0, stop_loss=52.0, take_profit=40.0)
    )

    assert metrics.planned_rr == pytest.approx(5.0)
    assert metrics.actual_rr == pytest.approx(2.5)
    assert metrics.returns == 10.0


def test_returns_are_rounded_to_two_decimals():
    metrics = compute_trade_metrics(_inputs(entry_price=100.0, exit_price=133.333))
    assert metrics.returns == 33.33


def test_sell_returns_are_positive_when_price_falls():
    metrics = compute_trade_metrics(_inputs(type="sell", entry_price=200.0, exit_price=150.0))
    assert metrics.returns == 25.0


@pytest.mark.parametrize(
    "value, expected",
    [
        (2.675, 2.68),
        (1.005, 1.01),
        (-1.005, -1.01),
        (33.3333, 33.33),
        (10.0, 10.0),
    ],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_round_half_up_leaves_non_finite_values():
    assert math.isinf(round_half_up(float("inf")))


def test_zero_entry_price_returns_zero_and_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="tradingdiary.services.trade_metrics"):
        metrics = compute_trade_metrics(_inputs(entry_price=0.0, exit_price=5.0))

    assert metrics.returns == 0.0
    assert metrics.pl == 45.0
    assert "Entry price is zero" in caplog.text


@pytest.mark.parametrize("missing", ["exit_price", "entry_price", "quantity", "type"])
def test_open_trade_is_not_computed(missing):
    assert compute_trade_metrics(_inputs(**{missing: None})) is None


def test_apply_leaves_open_trade_untouched():
    trade = SimpleNamespace(
        type="buy",
        quantity=1.0,
        entry_price=100.0,
        exit_price=None,
        stop_loss=90.0,
        take_profit=120.0,
        fees=0.0,
        pl=12.5,
        planned_rr=2.0,
        actual_rr=1.25,
        returns=12.5,
    )

    assert apply_trade_metrics(trade) is None
    assert (trade.pl, trade.planned_rr, trade.actual_rr, trade.returns) == (12.5, 2.0, 1.25, 12.5)


def test_apply_is_idempotent():
    trade = SimpleNamespace(
        type="buy",
        quantity=3.0,
        entry_price=101.7,
        exit_price=109.3,
        stop_loss=98.1,
        take_profit=115.0,
        fees=1.2,
        pl=None,
        planned_rr=None,
        actual_rr=None,
        returns=None,
    )

    first = apply_trade_metrics(trade)
    second = apply_trade_metrics(trade)

    assert isinstance(first, TradeMetrics)
    assert first == second
    assert trade.pl == first.pl
    assert trade.returns == first.returns


def test_inputs_from_record_reads_attributes():
    record = SimpleNamespace(type="sell", quantity=2.0, entry_price=10.0, exit_price=8.0)
    inputs = TradeInputs.from_record(record)

    assert inputs.is_closed
    assert inputs.stop_loss is None
    assert compute_trade_metrics(inputs).pl == 4.0
