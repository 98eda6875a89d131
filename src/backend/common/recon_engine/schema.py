from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .models import AuxColumnMapping, ColumnMapping


def pick_column(headers: Iterable[Any], candidates: Sequence[str]) -> Optional[str]:
    """
    Resolve one canonical field against the dataset headers.

    Pass 1 returns the first candidate (in candidate order) that is an exact
    header. Pass 2 returns the first header containing a candidate as a
    substring, iterating candidates first and headers second.
    """
    keys = [str(h) for h in headers]
    for cand in candidates:
        if cand in keys:
            return cand
    for cand in candidates:
        for key in keys:
            if cand in key:
                return key
    return None


def headers_of(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    # Resolution is done once from the first row's headers.
    if not rows:
        return []
    return [str(k) for k in rows[0].keys()]


def resolve_columns(headers: Iterable[Any], aliases: Dict[str, List[str]]) -> ColumnMapping:
    keys = list(headers)
    return ColumnMapping(**{field: pick_column(keys, cands) for field, cands in aliases.items()})


def resolve_aux_columns(headers: Iterable[Any], aliases: Dict[str, List[str]]) -> AuxColumnMapping:
    keys = list(headers)
    return AuxColumnMapping(**{field: pick_column(keys, cands) for field, cands in aliases.items()})
