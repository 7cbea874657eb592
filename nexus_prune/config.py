from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Pattern, Tuple
from dotenv import load_dotenv
from pathlib import Path
import re
import os

from .errors import ConfigurationError
from .utils import parse_bool, parse_interval_to_seconds, parse_positive_int, split_patterns

try:
    import tomllib as toml_loader
except ImportError:
    import tomli as toml_loader


DEFAULT_TIMEOUT = 60


@dataclass(frozen=True)
class NexusSettings:
    url: str
    username: str
    password: str
    timeout: int = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class JobSettings:
    name: str
    repository: str
    keep_items: int
    path_depth: int
    keep_paths: Tuple[Pattern, ...] = ()
    every: Optional[int] = None


@dataclass
class Settings:
    nexus: NexusSettings
    jobs: List[JobSettings] = field(default_factory=list)
    execute_delete: bool = False
    log_level: str = "info"


def _resolve_env_string(value: str) -> str:
    if isinstance(value, str) and re.fullmatch(r"ENV_[A-Z0-9_]+", value):
        var_name = value[4:]
        env_val = os.getenv(var_name)
        if env_val is None:
            raise ConfigurationError(
                f"Environment variable '{var_name}' not set for placeholder '{value}'"
            )
        return env_val
    return value


def _resolve_env_placeholders(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _resolve_env_placeholders(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_resolve_env_placeholders(v) for v in obj]
    if isinstance(obj, tuple):
        return tuple(_resolve_env_placeholders(v) for v in obj)
    if isinstance(obj, str):
        return _resolve_env_string(obj)
    return obj


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Read the TOML file, load the .env files it names and expand ENV_* placeholders."""
    if not config_path:
        return {}
    cfg_path = Path(config_path)
    if not cfg_path.exists():
        raise ConfigurationError(f"Config file not found: {cfg_path}")
    try:
        with cfg_path.open("rb") as fp:
            data: Dict[str, Any] = toml_loader.load(fp)
    except (OSError, toml_loader.TOMLDecodeError) as err:
        raise ConfigurationError(f"Failed to read config TOML: {err}") from err

    default_env = cfg_path.parent / ".env"
    if default_env.exists():
        load_dotenv(dotenv_path=str(default_env), override=False)

    dot_env = data.get("dot_env")
    dot_envs = data.get("dot_envs") or []
    env_paths: List[Path] = []
    if isinstance(dot_env, str) and dot_env:
        env_paths.append((cfg_path.parent / dot_env))
    if isinstance(dot_envs, list):
        for p in dot_envs:
            if isinstance(p, str) and p:
                env_paths.append((cfg_path.parent / p))
    for p in env_paths:
        if not p.exists():
            raise ConfigurationError(f"dot env file not found: {p}")
        load_dotenv(dotenv_path=str(p), override=False)

    return _resolve_env_placeholders(data)


def compile_keep_paths(patterns: List[str]) -> Tuple[Pattern, ...]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as err:
            raise ConfigurationError(
                f"KEEP_COMPONENT_PATHS entry '{pattern}' is not a valid regex: {err}"
            ) from err
    return tuple(compiled)


def _required(name: str, value: Any) -> str:
    if value is None or str(value).strip() == "":
        raise ConfigurationError(f"{name} not set!")
    return str(value).strip()


def build_nexus_settings(cfg: Dict[str, Any]) -> NexusSettings:
    nexus_cfg = cfg.get("nexus", {}) or {}
    url = _required("NEXUS_URL", os.getenv("NEXUS_URL", nexus_cfg.get("url")))
    username = _required(
        "NEXUS_USERNAME", os.getenv("NEXUS_USERNAME", nexus_cfg.get("username"))
    )
    password = _required(
        "NEXUS_PASSWORD", os.getenv("NEXUS_PASSWORD", nexus_cfg.get("password"))
    )
    timeout = parse_positive_int(
        "NEXUS_TIMEOUT", os.getenv("NEXUS_TIMEOUT", nexus_cfg.get("timeout", DEFAULT_TIMEOUT))
    )
    return NexusSettings(url=url.rstrip("/"), username=username, password=password, timeout=timeout)


def _pick(job: Dict[str, Any], key: str, env_name: str, defaults: Dict[str, Any]) -> Any:
    if job.get(key) not in (None, ""):
        return job.get(key)
    env_val = os.getenv(env_name)
    if env_val not in (None, ""):
        return env_val
    return defaults.get(key)


def build_job_settings(job: Dict[str, Any], defaults: Dict[str, Any]) -> JobSettings:
    repository = _required("REPO_NAME", _pick(job, "repository", "REPO_NAME", defaults))
    name = str(job.get("name") or repository)
    keep_items = parse_positive_int("KEEP_ITEMS", _pick(job, "keep_items", "KEEP_ITEMS", defaults))
    path_depth = parse_positive_int("PATH_DEPTH", _pick(job, "path_depth", "PATH_DEPTH", defaults))
    keep_paths = compile_keep_paths(
        split_patterns(_pick(job, "keep_paths", "KEEP_COMPONENT_PATHS", defaults))
    )
    every = None
    if job.get("every") is not None:
        every = parse_interval_to_seconds(job.get("every"))
        if not every or every <= 0:
            raise ConfigurationError(f"Job '{name}': invalid 'every' value {job.get('every')!r}")
    return JobSettings(
        name=name,
        repository=repository,
        keep_items=keep_items,
        path_depth=path_depth,
        keep_paths=keep_paths,
        every=every,
    )


def build_settings(cfg: Dict[str, Any]) -> Settings:
    """Validate everything needed for a run; raises ConfigurationError on the first problem."""
    nexus = build_nexus_settings(cfg)
    defaults: Dict[str, Any] = cfg.get("defaults", {}) or {}
    raw_jobs: List[Dict[str, Any]] = cfg.get("jobs", []) or [{}]
    jobs = [build_job_settings(job, defaults) for job in raw_jobs]

    names = [job.name for job in jobs]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigurationError(f"Duplicate job names: {', '.join(duplicates)}")

    execute_delete = parse_bool(
        os.getenv("EXECUTE_DELETE", defaults.get("execute_delete")), default=False
    )
    log_level = os.getenv("LOG_LEVEL") or cfg.get("log_level") or "info"
    return Settings(
        nexus=nexus, jobs=jobs, execute_delete=execute_delete, log_level=str(log_level)
    )
