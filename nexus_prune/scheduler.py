from typing import Any, Dict, List, Optional
import logging
import time

from .config import JobSettings
from .jobs import run_job

logger = logging.getLogger(__name__)


def schedule_loop(
    jobs: List[JobSettings],
    client: Any,
    dry_run: bool,
    tick: int = 10,
    max_ticks: Optional[int] = None,
) -> None:
    schedule_entries: List[Dict[str, Any]] = []
    for job in jobs:
        if not job.every:
            continue
        schedule_entries.append({
            "job": job,
            "interval": job.every,
            "next_run": time.time(),
        })
    if not schedule_entries:
        logger.warning("No jobs with 'every' configured. Exiting schedule mode.")
        return
    logger.info(f"Scheduler started with {len(schedule_entries)} job(s). Tick={tick}s")
    ticks = 0
    while max_ticks is None or ticks < max_ticks:
        ticks += 1
        now = time.time()
        next_due = None
        for entry in schedule_entries:
            if entry["next_run"] <= now:
                job = entry["job"]
                try:
                    run_job(job, client, dry_run)
                except Exception as err:
                    logger.error(f"Job '{job.name}' failed: {err}")
                entry["next_run"] = time.time() + entry["interval"]
            if next_due is None or entry["next_run"] < next_due:
                next_due = entry["next_run"]
        sleep_for = tick
        if next_due is not None:
            sleep_for = max(1, min(tick, int(next_due - time.time())))
        time.sleep(sleep_for)
