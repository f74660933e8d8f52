from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, Optional
from urllib.parse import urlsplit

from .core import COMMON_PASSWORDS, normalize_common_list


DEFAULT_CORPORATE_DOMAIN = "@culture.ai"
DEFAULT_ENDPOINT = "https://doesnotexist.culture.ai/events"
DEFAULT_TIMEOUT = 5.0


class ConfigError(ValueError):
    """Raised when the monitor is configured with unusable values."""


def _env_bool(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off", "")


def load_common_passwords(path: str | Path) -> FrozenSet[str]:
    """One password per line; blank lines and `#` comments are skipped."""
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    return normalize_common_list(ln for ln in lines if not ln.lstrip().startswith("#"))


@dataclass(frozen=True)
class MonitorConfig:
    corporate_domain_suffix: str = DEFAULT_CORPORATE_DOMAIN
    collection_endpoint: str = DEFAULT_ENDPOINT
    common_passwords: FrozenSet[str] = field(default=COMMON_PASSWORDS)
    enabled: bool = True
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.corporate_domain_suffix or not self.corporate_domain_suffix.strip():
            raise ConfigError("corporate_domain_suffix must not be empty")
        parts = urlsplit(self.collection_endpoint)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ConfigError(f"collection_endpoint is not an http(s) URL: {self.collection_endpoint!r}")
        if self.timeout <= 0:
            raise ConfigError("timeout must be positive")
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "common_passwords", normalize_common_list(self.common_passwords))

    @classmethod
    def from_env(cls, common_passwords: Optional[Iterable[str]] = None) -> "MonitorConfig":
        words_file = os.getenv("PASSWATCH_COMMON_PASSWORDS_FILE", "")
        if common_passwords is None:
            common_passwords = load_common_passwords(words_file) if words_file else COMMON_PASSWORDS
        try:
            timeout = float(os.getenv("PASSWATCH_TIMEOUT", str(DEFAULT_TIMEOUT)))
        except ValueError as exc:
            raise ConfigError(f"PASSWATCH_TIMEOUT is not a number: {exc}") from exc
        return cls(
            corporate_domain_suffix=os.getenv("PASSWATCH_CORPORATE_DOMAIN", DEFAULT_CORPORATE_DOMAIN),
            collection_endpoint=os.getenv("PASSWATCH_ENDPOINT", DEFAULT_ENDPOINT),
            common_passwords=frozenset(common_passwords),
            enabled=_env_bool(os.getenv("PASSWATCH_ENABLED", "1")),
            timeout=timeout,
        )
