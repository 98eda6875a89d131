from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Tuple

from .models import UNMATCHED, RuleStat, Tag


def _order(tag: Tag) -> Tuple[bool, Tag]:
    # Numeric tags first, ascending; text reconciliation numbers after them.
    return isinstance(tag, str), tag


def build_stats(tags: Iterable[Tag]) -> List[RuleStat]:
    """Row count per final tag, ascending by tag. Tags that never occur are omitted."""
    counts = Counter(tags)
    return [RuleStat(rule=tag, count=counts[tag]) for tag in sorted(counts, key=_order)]


def matched_count(stats: Iterable[RuleStat]) -> int:
    return sum(s.count for s in stats if s.rule != UNMATCHED)


def unmatched_count(stats: Iterable[RuleStat]) -> int:
    return sum(s.count for s in stats if s.rule == UNMATCHED)
