from typing import Any
import logging

from .components import extract_components
from .config import JobSettings
from .deletion import RunReport, execute_decisions
from .fetch import MAX_PAGES, fetch_all
from .retention import plan_retention

logger = logging.getLogger(__name__)


def run_job(job: JobSettings, client: Any, dry_run: bool, max_pages: int = MAX_PAGES) -> RunReport:
    logger.info(
        f"Cleaning repository '{job.repository}': keep {job.keep_items} per path "
        f"depth {job.path_depth}{' (dry run)' if dry_run else ''}"
    )
    entries = fetch_all(client, job.repository, max_pages=max_pages)
    components, groups = extract_components(entries, job.path_depth)
    logger.info(
        f"Retrieved {len(entries)} component(s), {len(components)} with a path "
        f"in {len(groups)} group(s)"
    )
    decisions = plan_retention(components, groups, job.keep_items, job.keep_paths)
    report = execute_decisions(client, decisions, dry_run=dry_run)
    logger.info(
        f"Job '{job.name}' done: kept={report.kept} deleted={report.deleted} "
        f"would_delete={report.would_delete} failed={len(report.failures)}"
    )
    return report
