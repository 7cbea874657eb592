from typing import Any, List, Optional
import json
import re

from .errors import ConfigurationError


def parse_positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} is not a number!")
    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip() if value is not None else ""
        if not text:
            raise ConfigurationError(f"{name} not set!")
        try:
            number = int(text)
        except ValueError:
            raise ConfigurationError(f"{name} is not a number!") from None
    if number < 1:
        raise ConfigurationError(f"{name} must be a positive integer, got {number}")
    return number


def parse_bool(value: Any, default: bool = False) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def split_patterns(value: Any) -> List[str]:
    """
    Split a keep-path setting into regexes.

    Lists are taken as is. Strings may be a JSON list of strings, or patterns separated
    by ";" or newlines. Commas are left alone since they occur in regex
    quantifiers such as {1,3}.
    """
    if not value:
        return []
    if isinstance(value, str) and value.strip().startswith("["):
        try:
            decoded = json.loads(value)
        except ValueError:
            # a pattern such as "[a-z]+/lib" rather than a JSON list
            decoded = None
        if isinstance(decoded, list):
            value = decoded
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in re.split(r"[;\n]", str(value)) if part.strip()]


def parse_interval_to_seconds(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if not isinstance(value, str):
        return None
    s = value.strip().lower()
    units = {"s": 1, "m": 60, "h": 3600, "d": 86400}
    if s.isdigit():
        return int(s)
    if s[-1:] in units and s[:-1].isdigit():
        return int(s[:-1]) * units[s[-1]]
    return None
