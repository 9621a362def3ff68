"""Dashboard reports built on top of the stored trade metrics."""

from __future__ import annotations

import statistics
from collections import Counter, OrderedDict, defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from tradingdiary.models.trades import Trade
from tradingdiary.schemas.stats import (
    CalendarDay,
    ExecutionEfficiency,
    ExecutionMetric,
    ExecutionMistakes,
    HeatmapPoint,
    PerformanceMetric,
    TimeseriesPoint,
    TreemapLeaf,
    TreemapNode,
)
from tradingdiary.schemas.trades import TradeFilters
from tradingdiary.services.trade_metrics import round_half_up
from tradingdiary.services.trades import build_trade_query
from tradingdiary.utils.time import month_bounds, to_local

EQUITY_BASE = 100.0


def max_drawdown(returns: Iterable[Optional[float]]) -> float:
    """Largest peak-to-trough decline (%) of an equity compounded from 100."""

    equity = EQUITY_BASE
    peak = EQUITY_BASE
    worst = 0.0
    for value in returns:
        equity *= 1 + (value or 0.0) / 100
        if equity > peak:
            peak = equity
        drawdown = (peak - equity) / peak * 100 if peak else 0.0
        if drawdown > worst:
            worst = drawdown
    return worst


def performance_metric(db: Session, filters: TradeFilters | None = None) -> PerformanceMetric:
    query = build_trade_query(db, filters)
    row = query.with_entities(
        func.count(Trade.id),
        func.sum(case((Trade.outcome == "win", 1), else_=0)),
        func.sum(case((Trade.outcome == "loss", 1), else_=0)),
        func.sum(Trade.pl),
        func.sum(Trade.returns),
        func.sum(Trade.actual_rr),
        func.avg(case((Trade.outcome == "win", Trade.pl))),
        func.avg(case((Trade.outcome == "loss", Trade.pl))),
        func.avg(Trade.confidence_level),
        func.max(Trade.pl),
        func.min(Trade.pl),
    ).one()

    (
        total_trades,
        wins,
        losses,
        total_pl,
        total_returns,
        total_rr,
        avg_win,
        avg_loss,
        avg_confidence,
        max_pl,
        min_pl,
    ) = row

    if not total_trades:
        return PerformanceMetric()

    wins = wins or 0
    losses = losses or 0
    decided = (wins + losses) or 1

    ordered = query.order_by(Trade.trade_date.asc(), Trade.id.asc())
    pl_values = [pl for (pl,) in ordered.with_entities(Trade.pl) if pl is not None]
    trade_returns = [value for (value,) in ordered.with_entities(Trade.returns)]

    win_prob = wins / decided
    loss_prob = losses / decided
    expectancy = win_prob * (avg_win or 0.0) + loss_prob * (avg_loss or 0.0)

    return PerformanceMetric(
        win_rate=round_half_up(wins / decided * 100),
        avg_rr=round_half_up((total_rr or 0.0) / total_trades),
        expectancy=round_half_up(expectancy),
        total_trades=total_trades,
        avg_confidence=round_half_up(float(avg_confidence or 0.0)),
        consistency_score=round_half_up(statistics.pstdev(pl_values) if pl_values else 0.0),
        best_trade=round_half_up(max_pl or 0.0),
        worst_trade=round_half_up(min_pl or 0.0),
        total_pnl=round_half_up(total_pl or 0.0),
        total_returns=round_half_up(total_returns or 0.0),
        max_drawdown=round_half_up(max_drawdown(trade_returns)),
    )


def _percentage(part: int, whole: int) -> float:
    return round_half_up(part / whole * 100) if whole else 0.0


def execution_metric(db: Session, filters: TradeFilters | None = None) -> ExecutionMetric:
    trades = build_trade_query(db, filters).all()

    perfect_entries = sum(1 for trade in trades if trade.entry_execution == "perfect")
    perfect_exits = sum(1 for trade in trades if trade.exit_execution == "perfect")
    violations: Counter[str] = Counter()
    for trade in trades:
        violations.update(trade.rule_violations or [])

    return ExecutionMetric(
        efficiency=ExecutionEfficiency(
            entry_efficiency=_percentage(perfect_entries, len(trades)),
            exit_efficiency=_percentage(perfect_exits, len(trades)),
        ),
        mistakes=ExecutionMistakes(
            greed=sum(1 for trade in trades if trade.is_greed),
            fomo=sum(1 for trade in trades if trade.is_fomo),
            rule_violations=dict(violations),
        ),
    )


def pnl_calendar(db: Session, year: int, month: int, filters: TradeFilters | None = None) -> List[CalendarDay]:
    """Daily P/L, summed returns and trade count for one local calendar month."""

    start, end = month_bounds(year, month)
    trades = (
        build_trade_query(db, filters)
        .filter(Trade.trade_date >= start, Trade.trade_date < end)
        .order_by(Trade.trade_date.asc())
        .all()
    )

    days: Dict[date, Dict[str, float]] = OrderedDict()
    for trade in trades:
        day = to_local(trade.trade_date).date()
        bucket = days.setdefault(day, {"pnl": 0.0, "returns": 0.0, "count": 0})
        bucket["pnl"] += trade.pl or 0.0
        bucket["returns"] += trade.returns or 0.0
        bucket["count"] += 1

    return [
        CalendarDay(date=day, pnl=values["pnl"], returns=values["returns"], count=int(values["count"]))
        for day, values in sorted(days.items())
    ]


def timeseries(db: Session, filters: TradeFilters | None = None) -> List[TimeseriesPoint]:
    rows = (
        build_trade_query(db, filters)
        .with_entities(
            Trade.trade_date,
            func.coalesce(func.sum(Trade.pl), 0.0),
            func.coalesce(func.sum(Trade.returns), 0.0),
            func.coalesce(func.sum(Trade.actual_rr), 0.0),
            func.coalesce(func.sum(Trade.confidence_level), 0),
            func.count(Trade.id),
        )
        .group_by(Trade.trade_date)
        .order_by(Trade.trade_date.asc())
        .all()
    )
    return [
        TimeseriesPoint(
            trade_date=trade_date,
            pl=pl,
            returns=returns,
            actual_rr=actual_rr,
            confidence_level=confidence,
            total_trades=count,
        )
        for trade_date, pl, returns, actual_rr, confidence, count in rows
    ]


def heatmap(db: Session, filters: TradeFilters | None = None) -> List[HeatmapPoint]:
    counts: Counter[date] = Counter()
    for (trade_date,) in build_trade_query(db, filters).with_entities(Trade.trade_date):
        counts[to_local(trade_date).date()] += 1
    return [HeatmapPoint(date=day, count=count) for day, count in sorted(counts.items())]


def treemap(db: Session, filters: TradeFilters | None = None) -> List[TreemapNode]:
    """Trade counts per outcome, broken down by the emotional states logged."""

    grouped: Dict[str, Counter[str]] = defaultdict(Counter)
    for outcome, emotions in build_trade_query(db, filters).with_entities(Trade.outcome, Trade.emotional_state):
        for emotion in emotions or []:
            grouped[outcome][emotion] += 1

    nodes = []
    for outcome in sorted(grouped):
        children = [TreemapLeaf(name=name, value=value) for name, value in sorted(grouped[outcome].items())]
        nodes.append(TreemapNode(name=outcome, value=sum(child.value for child in children), children=children))
    return nodes


__all__ = [
    "execution_metric",
    "heatmap",
    "max_drawdown",
    "performance_metric",
    "pnl_calendar",
    "timeseries",
    "treemap",
]
