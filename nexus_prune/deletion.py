from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence
import logging

from .errors import DeleteError
from .retention import Decision, PlannedComponent

logger = logging.getLogger(__name__)

SPACER = "################## SPACER ####################"


@dataclass
class RunReport:
    kept: int = 0
    deleted: int = 0
    would_delete: int = 0
    failures: List[str] = field(default_factory=list)

    def merge(self, other: "RunReport") -> "RunReport":
        return RunReport(
            kept=self.kept + other.kept,
            deleted=self.deleted + other.deleted,
            would_delete=self.would_delete + other.would_delete,
            failures=self.failures + other.failures,
        )


def _describe(planned: PlannedComponent) -> str:
    c = planned.component
    ts = c.last_modified.isoformat() if c.last_modified else "unknown"
    return f"{c.version} with id {c.id} at {c.group} with timestamp {ts}"


def execute_decisions(
    client: Any, decisions: Sequence[PlannedComponent], dry_run: bool = True
) -> RunReport:
    report = RunReport()
    current_group: Optional[str] = None
    for planned in decisions:
        group = planned.component.group
        if current_group is not None and group != current_group:
            logger.info(SPACER)
        current_group = group

        if planned.decision is Decision.KEEP:
            suffix = ""
            if planned.pinned:
                suffix = " (matches keep path)"
            elif planned.component.last_modified is None:
                suffix = " (no timestamp)"
            logger.info(f"Keeping {_describe(planned)}{suffix}")
            report.kept += 1
            continue

        if dry_run:
            logger.info(f"Would delete {_describe(planned)}")
            report.would_delete += 1
            continue

        logger.info(f"Deleting {_describe(planned)}")
        try:
            client.delete_component(planned.component.id)
        except DeleteError as err:
            logger.error(str(err))
            report.failures.append(planned.component.id)
            continue
        report.deleted += 1

    if current_group is not None:
        logger.info(SPACER)
    return report
