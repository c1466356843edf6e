"""Runtime settings for the assessment run.

Values come from the environment (optionally seeded from a ``.env`` file)
and can be overridden by command-line flags.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://assessment.ksensetech.com/api"
DEDUPE_POLICIES = ("first", "last")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    page_limit: int = 5
    total_pages: int = 10
    first_pass_attempts: int = 5
    recovery_attempts: int = 8
    rate_limit_delay: float = 4.0  # seconds before the first retry after a 429
    rate_limit_step: float = 1.0  # added per retry already spent
    transient_delay: float = 2.0
    timeout: float = 30
    dedupe: str = "first"

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with every non-None override applied and validated."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return _validated(replace(self, **changes))


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _validated(settings: Settings) -> Settings:
    if settings.dedupe not in DEDUPE_POLICIES:
        raise ConfigError(
            f"dedupe policy must be one of {', '.join(DEDUPE_POLICIES)}, got {settings.dedupe!r}"
        )
    for name in ("page_limit", "total_pages", "first_pass_attempts", "recovery_attempts"):
        if getattr(settings, name) < 1:
            raise ConfigError(f"{name} must be at least 1")
    return settings


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build Settings from the environment.

    ``KSENSE_API_KEY`` wins over the plain ``API_KEY`` variable. Variables
    already set in the process environment are not overwritten by the
    ``.env`` file.
    """
    load_dotenv(dotenv_path=env_file)
    api_key = os.getenv("KSENSE_API_KEY") or os.getenv("API_KEY") or ""
    settings = Settings(
        api_key=api_key.strip(),
        base_url=os.getenv("KSENSE_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        page_limit=_env_int("KSENSE_PAGE_LIMIT", 5),
        total_pages=_env_int("KSENSE_TOTAL_PAGES", 10),
        dedupe=os.getenv("KSENSE_DEDUPE", "first").strip().lower(),
    )
    return _validated(settings)
