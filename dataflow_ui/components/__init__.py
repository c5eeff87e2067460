from .charts import ChartBuilder
from .cards import CardBuilder
from .freshness import render_freshness_badge

__all__ = [
    'ChartBuilder',
    'CardBuilder',
    'render_freshness_badge',
]
