"""Runtime settings, read from the environment (and a `.env` file when present)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


@dataclass
class Settings:
    user_agent: str = field(
        default_factory=lambda: os.getenv(
            "SEO_AUDIT_USER_AGENT", "SEOAuditBot/1.0 (+https://seoaudit.example.com)"
        )
    )
    # seconds
    request_timeout: float = field(default_factory=lambda: _env_float("SEO_AUDIT_REQUEST_TIMEOUT", 10.0))
    link_timeout: float = field(default_factory=lambda: _env_float("SEO_AUDIT_LINK_TIMEOUT", 5.0))
    link_deadline: float = field(default_factory=lambda: _env_float("SEO_AUDIT_LINK_DEADLINE", 15.0))

    max_link_checks: int = field(default_factory=lambda: _env_int("SEO_AUDIT_MAX_LINK_CHECKS", 10))
    link_concurrency: int = field(default_factory=lambda: _env_int("SEO_AUDIT_LINK_CONCURRENCY", 5))
    # 0 runs the check catalog sequentially
    check_workers: int = field(default_factory=lambda: _env_int("SEO_AUDIT_CHECK_WORKERS", 0))

    log_level: str = field(default_factory=lambda: os.getenv("SEO_AUDIT_LOG_LEVEL", "INFO").upper())


settings = Settings()
