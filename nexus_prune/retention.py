from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Pattern, Sequence

from .components import ManagedComponent

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class Decision(Enum):
    KEEP = "keep"
    DELETE = "delete"


@dataclass(frozen=True)
class PlannedComponent:
    component: ManagedComponent
    decision: Decision
    rank: int
    pinned: bool = False


def _recency(component: ManagedComponent) -> datetime:
    ts = component.last_modified
    if ts is None:
        return _OLDEST
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def is_pinned(group: str, keep_paths: Iterable[Pattern]) -> bool:
    return any(pattern.search(group) for pattern in keep_paths)


def plan_retention(
    components: Sequence[ManagedComponent],
    group_keys: Sequence[str],
    keep_items: int,
    keep_paths: Sequence[Pattern] = (),
) -> List[PlannedComponent]:
    """
    Rank every group newest first and decide what to keep.

    The first ``keep_items`` of each group are kept, the rest are marked for
    deletion. Groups matching one of ``keep_paths`` are kept entirely, and so
    is any component without a usable timestamp; those rank after the dated
    ones. Equal timestamps keep their input order since ``sorted`` is stable.
    """
    planned: List[PlannedComponent] = []
    for group in group_keys:
        members = [c for c in components if c.group == group]
        members = sorted(members, key=_recency, reverse=True)
        pinned = is_pinned(group, keep_paths)
        for rank, component in enumerate(members, start=1):
            undated = component.last_modified is None
            if pinned or undated or rank <= keep_items:
                decision = Decision.KEEP
            else:
                decision = Decision.DELETE
            planned.append(PlannedComponent(component, decision, rank, pinned))
    return planned
