"""Small formatting helpers shared by the renderers."""
from __future__ import annotations

from datetime import datetime

from regisbags.domain.results import AggregateStats


def format_generated_at(moment: datetime) -> str:
    return moment.strftime("%d/%m/%Y %H:%M")


def format_share(stats: AggregateStats, value: int) -> str:
    return f"{stats.share_of_total(value):.1f}%"


def dominant_shift_count(stats: AggregateStats) -> int:
    if stats.dominant_shift is None:
        return 0
    return stats.shift_counts.get(stats.dominant_shift, 0)
