"""Import every model so that ``Base.metadata`` knows all tables."""

from __future__ import annotations

from tradingdiary.models.base import Base  # noqa: F401
from tradingdiary.models.goals import Goal  # noqa: F401
from tradingdiary.models.portfolios import Portfolio, PortfolioTransaction  # noqa: F401
from tradingdiary.models.strategies import Strategy  # noqa: F401
from tradingdiary.models.symbols import Symbol  # noqa: F401
from tradingdiary.models.system_logs import SystemLog  # noqa: F401
from tradingdiary.models.tags import Tag  # noqa: F401
from tradingdiary.models.trades import Trade  # noqa: F401
