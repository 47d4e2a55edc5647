"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ApiConfig: Remote API endpoint and credentials
- RetryConfig: Rate-limit retry behavior
- SyncConfig: Directory scan and failure policy
- OutputConfig: Report files written after a run
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml


@dataclass
class ApiConfig:
    """Configuration for the remote publishing API.

    Attributes:
        base_url: Base URL of the Forem instance
        api_key_env: Environment variable name containing the API key
        api_key: Optional inline API key (overrides env var)
        timeout_seconds: Per-request timeout
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    base_url: str = "https://dev.to"
    api_key_env: str = "API_KEY"
    api_key: str | None = None
    timeout_seconds: float = 30.0
    trust_env: bool = True
    user_agent: str = "article-sync/0.1"


@dataclass
class RetryConfig:
    """Configuration for rate-limit retries.

    Attributes:
        max_attempts: Total attempts per call when rate limited
        base_delay_seconds: Wait multiplied by the attempt number between attempts
    """

    max_attempts: int = 5
    base_delay_seconds: float = 1.0


@dataclass
class SyncConfig:
    """Configuration for a sync run.

    Attributes:
        root: Directory scanned for article folders
        dry_run: Report what would change without creating, updating or writing
        fail_fast: Abort the run on the first article error
        deadline_seconds: Optional wall-clock limit for the whole run
        cover_image_base_url: Base URL that relative cover_image paths are joined onto
    """

    root: str = "./articles"
    dry_run: bool = False
    fail_fast: bool = True
    deadline_seconds: float | None = None
    cover_image_base_url: str | None = None


@dataclass
class OutputConfig:
    """Configuration for report files.

    Attributes:
        pr_comment: File to write the merge request comment into
        commit: File to write the commit message into
    """

    pr_comment: str | None = None
    commit: str | None = None


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Optional path of a log file
        format: Log file format ("jsonl" or "plain")
    """

    level: str = "INFO"
    console: bool = True
    file: str | None = None
    format: str = "jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    api: ApiConfig = field(default_factory=ApiConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "api": {
            "base_url": cfg.api.base_url,
            "api_key_env": cfg.api.api_key_env,
            "api_key": cfg.api.api_key,
            "timeout_seconds": cfg.api.timeout_seconds,
            "trust_env": cfg.api.trust_env,
            "user_agent": cfg.api.user_agent,
        },
        "retry": {
            "max_attempts": cfg.retry.max_attempts,
            "base_delay_seconds": cfg.retry.base_delay_seconds,
        },
        "sync": {
            "root": cfg.sync.root,
            "dry_run": cfg.sync.dry_run,
            "fail_fast": cfg.sync.fail_fast,
            "deadline_seconds": cfg.sync.deadline_seconds,
            "cover_image_base_url": cfg.sync.cover_image_base_url,
        },
        "output": {
            "pr_comment": cfg.output.pr_comment,
            "commit": cfg.output.commit,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        api=ApiConfig(**data["api"]),
        retry=RetryConfig(**data["retry"]),
        sync=SyncConfig(**data["sync"]),
        output=OutputConfig(**data["output"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_api_key(cfg: ApiConfig) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(cfg.api_key_env)
