"""
Reporting package: period windows, aggregation and report formatting
"""

from .periods import DateWindow, Period, format_long_date, parse_long_date, resolve_period
from .aggregator import AggregateResult, aggregate
from .formatter import Ranking, rank

__all__ = [
    'DateWindow',
    'Period',
    'format_long_date',
    'parse_long_date',
    'resolve_period',
    'AggregateResult',
    'aggregate',
    'Ranking',
    'rank'
]
