from typing import List, Optional
import argparse
import logging
import os

from dotenv import load_dotenv

from .config import JobSettings, build_settings, load_config
from .deletion import RunReport
from .errors import ConfigurationError, PageCeilingExceeded
from .jobs import run_job
from .logs import setup_logging
from .nexus import create_nexus_client
from .scheduler import schedule_loop

logger = logging.getLogger(__name__)


USAGE = (
    "Place a .env file in the working directory or set environment variables with the same name:\n"
    "  NEXUS_URL             - Nexus base URL without trailing slash\n"
    "  NEXUS_USERNAME        - Nexus user\n"
    "  NEXUS_PASSWORD        - Password for that Nexus user\n"
    "  REPO_NAME             - Name of the repo to clean up components for\n"
    "  KEEP_ITEMS            - Keep this amount of items for the given path depth\n"
    "  PATH_DEPTH            - Path depth to group components by\n"
    "  EXECUTE_DELETE        - (Optional) If not 'true', only print components to delete (default = false)\n"
    "  LOG_LEVEL             - (Optional) Log level (default = info)\n"
    "  KEEP_COMPONENT_PATHS  - (Optional) Regexes of paths that are always kept, separated by \";\" or a JSON list\n"
    "  NEXUS_TIMEOUT         - (Optional) Request timeout in seconds (default = 60)\n"
)


def print_extended_help() -> None:
    help_text = (
        "\n"
        "Nexus Prune - Extended Help\n"
        "\n"
        "Commands/Flags:\n"
        "  -c, --config <file>          Path to the TOML config file\n"
        "  -j, --jobs <list>            Comma-separated job names\n"
        "      --execute               Really delete components (default is a dry run)\n"
        "      --dry-run               Force a dry run even if EXECUTE_DELETE=true\n"
        "      --list                  List jobs from config and exit\n"
        "      --schedule              Keep running, repeating jobs that define 'every'\n"
        "      --log-level <level>     debug, info, warning, error\n"
        "      --help-extended         Show this extended help\n"
        "\n"
        "TOML Configuration:\n"
        "  [nexus] url, username, password, timeout\n"
        "  [defaults] keep_items, path_depth, keep_paths, execute_delete\n"
        "  [[jobs]] name, repository, keep_items, path_depth, keep_paths, every\n"
        "  log_level = \"info\"\n"
        "  dot_env = \".env\" | dot_envs = [\"a.env\", \"b.env\"] (optional)\n"
        "\n"
        "ENV_* Placeholders:\n"
        "  Any value 'ENV_NAME' will be replaced by $NAME from the environment (or .env).\n"
        "\n"
        "Environment-only mode (no [[jobs]] in TOML):\n"
        + USAGE +
        "\n"
        "Examples:\n"
        "  Simulate with env vars:  python3 main.py\n"
        "  Run all jobs:            python3 main.py -c config.toml --execute\n"
        "  Run specific jobs:       python3 main.py -c config.toml -j releases,snapshots\n"
        "  Scheduler mode:          python3 main.py -c config.toml --schedule --execute\n"
    )
    print(help_text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Keep only the newest components per path in a Nexus repository"
    )
    parser.add_argument("--config", "-c", help="Path to the TOML configuration file")
    parser.add_argument("--jobs", "-j", help="Comma-separated list of job names to run")
    parser.add_argument(
        "--execute", action="store_true", help="Delete components instead of only reporting them"
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Only report what would be deleted"
    )
    parser.add_argument(
        "--list", action="store_true", help="List configured jobs and exit"
    )
    parser.add_argument(
        "--schedule", action="store_true", help="Run in scheduler mode, using 'every' in jobs"
    )
    parser.add_argument(
        "--tick-interval", type=int, default=10, help="Scheduler loop tick interval in seconds (default: 10)"
    )
    parser.add_argument("--log-level", help="Log level (overrides LOG_LEVEL)")
    parser.add_argument(
        "--help-extended", action="store_true", help="Show extended help and exit"
    )
    return parser


def select_jobs(jobs: List[JobSettings], names: Optional[str]) -> List[JobSettings]:
    if not names:
        return jobs
    selected = [n.strip() for n in names.split(",") if n.strip()]
    by_name = {j.name: j for j in jobs}
    missing = [n for n in selected if n not in by_name]
    if missing:
        raise ConfigurationError(f"Jobs not found: {', '.join(missing)}")
    return [by_name[n] for n in selected]


def main(argv: Optional[List[str]] = None) -> None:
    load_dotenv(dotenv_path=os.getenv("DOTENV_PATH", ".env"))

    args = build_parser().parse_args(argv)
    if args.help_extended:
        print_extended_help()
        return

    try:
        setup_logging(args.log_level or os.getenv("LOG_LEVEL") or "info")
        settings = build_settings(load_config(args.config))
        if not args.log_level:
            setup_logging(settings.log_level)
        jobs = select_jobs(settings.jobs, args.jobs)
    except ConfigurationError as err:
        print(USAGE)
        logger.error(str(err))
        raise SystemExit(1)

    if args.list:
        print("Available jobs:")
        for j in jobs:
            every = f", every {j.every}s" if j.every else ""
            print(f"- {j.name} (repository {j.repository}, keep {j.keep_items}, depth {j.path_depth}{every})")
        return

    dry_run = args.dry_run or not (args.execute or settings.execute_delete)

    with create_nexus_client(settings.nexus) as client:
        if args.schedule:
            schedule_loop(jobs, client, dry_run, tick=args.tick_interval)
            return

        total = RunReport()
        for job in jobs:
            try:
                total = total.merge(run_job(job, client, dry_run))
            except PageCeilingExceeded as err:
                logger.error(str(err))
                raise SystemExit(1)
    if total.failures:
        logger.warning(f"{len(total.failures)} component(s) could not be deleted")
