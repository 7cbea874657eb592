from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging
import re

logger = logging.getLogger(__name__)

_FRACTION = re.compile(r"\.(\d+)(?=[+-]\d{2}:?\d{2}$|$)")


@dataclass(frozen=True)
class ManagedComponent:
    id: str
    version: str
    group: str
    last_modified: Optional[datetime]


def group_key(path: str, path_depth: int) -> str:
    return "/".join(path.split("/")[:path_depth])


def _six_digit_fraction(match: "re.Match") -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fractional digits
    text = _FRACTION.sub(_six_digit_fraction, text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.error(f"Unparseable lastModified value: {value!r}; component will be kept")
        return None


def extract_components(
    entries: Iterable[Dict[str, Any]], path_depth: int
) -> Tuple[Tuple[ManagedComponent, ...], Tuple[str, ...]]:
    """
    Turn raw listing entries into components plus the group keys in first-seen order.

    Entries whose first asset is missing, malformed or has no (or an empty)
    path are skipped.
    """
    components: List[ManagedComponent] = []
    groups: Dict[str, None] = {}
    for item in entries:
        if not isinstance(item, dict):
            continue
        assets = item.get("assets") or []
        # only the first asset carries the path the component is grouped by
        primary = assets[0] if assets else None
        if not isinstance(primary, dict):
            continue
        path = primary.get("path")
        if not path or not isinstance(path, str):
            continue
        component = ManagedComponent(
            id=str(item.get("id")),
            version=str(item.get("version")),
            group=group_key(path, path_depth),
            last_modified=parse_timestamp(primary.get("lastModified")),
        )
        components.append(component)
        groups.setdefault(component.group, None)
        logger.debug(f"Found {component.version} at {path}")
    return tuple(components), tuple(groups)
