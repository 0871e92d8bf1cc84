"""
Configuration management for SiteQualifier using Pydantic.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sitequalifier.classifier.prompts import DEFAULT_SYSTEM_PROMPT
from sitequalifier.errors import InputValidationError

# --- Setup Logging ---
log = logging.getLogger(__name__)

DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# --- Nested Configuration Models ---


class ScraperConfig(BaseModel):
    """Headless browser and content extraction settings."""

    page_timeout_ms: int = Field(default=30000, gt=0, description="Navigation timeout in milliseconds.")
    user_agent: str = Field(default=DESKTOP_USER_AGENT, description="User-Agent sent with every page load.")
    headless: bool = Field(default=True, description="Run Chromium without a window.")
    launch_args: List[str] = Field(
        default_factory=lambda: ["--no-sandbox", "--disable-setuid-sandbox"],
        description="Extra Chromium command-line switches.",
    )
    min_content_length: int = Field(default=50, ge=0, description="Shorter extracted content counts as a failure.")
    body_text_limit: int = Field(default=15000, gt=0, description="Cap on concatenated paragraph text.")
    hero_text_limit: int = Field(default=5000, gt=0, description="Cap on concatenated hero text.")
    hero_min_font_px: float = Field(default=16.0, gt=0, description="Minimum computed font size for hero text.")


class ClassifierConfig(BaseModel):
    """Classification service settings (OpenRouter, OpenAI-compatible)."""

    base_url: str = Field(default="https://openrouter.ai/api/v1")
    model: str = Field(default="openai/gpt-4o-mini")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, gt=0)
    min_content_length: int = Field(
        default=20, ge=0, description="Shorter content is disqualified without calling the service."
    )
    http_referer: str = Field(default="https://apify.com", description="Sent as HTTP-Referer for OpenRouter rankings.")
    app_title: str = Field(default="AI Website Qualifying Agent", description="Sent as X-Title.")
    request_timeout: float = Field(default=60.0, gt=0, description="Per-request timeout in seconds.")


class RetryConfig(BaseModel):
    """Backoff policy for the classification service."""

    max_retries: int = Field(default=3, ge=1, description="Total attempts, including the first one.")
    base_delay_ms: int = Field(default=2000, ge=0, description="Wait before the second attempt; doubles afterwards.")


class PipelineConfig(BaseModel):
    delay_between_requests_ms: int = Field(default=2000, ge=0, description="Pause between two URLs.")


class StorageConfig(BaseModel):
    """Where result records and the run summary are written."""

    output_dir: Path = Field(default=Path("./storage"), description="Root directory for datasets and key-value stores.")
    dataset_name: str = Field(default="default", description="JSONL dataset receiving one record per URL.")
    output_key: str = Field(default="OUTPUT", description="Key under which the run summary is stored.")

    @field_validator("dataset_name", "output_key")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or "/" in v or "\\" in v:
            raise ValueError("names must be non-empty and must not contain path separators")
        return v


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: Optional[str] = Field(default=None, description="Path to log file. If None, logs to console.")
    json_logs: bool = Field(default=False, description="Render console logs as JSON lines.")
    prometheus_port: Optional[int] = Field(default=None, description="Port for the Prometheus exporter. None to disable.")

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "SiteQualifier"
    version: str = "0.1.0"
    scraper: ScraperConfig = Field(default_factory=ScraperConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="SITEQ_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "config.yaml",
        current_dir / "config.yml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path

    example_path = current_dir / "config.example.yaml"
    if example_path.exists():
        return example_path

    return None


def load_config(path: Path | None = None) -> Config:
    """Load the configuration from an explicit path, a discovered file, or defaults."""
    config_path = path or find_config_file()
    if config_path:
        log.info("Loading configuration from: %s", config_path)
        return Config.from_yaml(config_path)
    log.info("No config file found. Using default settings.")
    return Config()


# --- Run Input ---


class RunInput(BaseModel):
    """
    Per-run input. Field aliases match the camelCase keys of an Apify actor
    INPUT.json, so such a file can be used unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    urls: List[str] = Field(..., min_length=1, description="Websites to qualify, in processing order.")
    api_key: str = Field(..., alias="openrouterApiKey", min_length=1, description="Classification service key.")
    icp_system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, alias="icpSystemPrompt")
    delay_between_requests: int = Field(default=2000, alias="delayBetweenRequests", ge=0)
    max_retries: int = Field(default=3, alias="maxRetries", ge=1)

    @field_validator("urls")
    @classmethod
    def validate_urls(cls, v: List[str]) -> List[str]:
        if any(not url.strip() for url in v):
            raise ValueError("urls must not contain blank entries")
        return v

    @field_validator("api_key", "icp_system_prompt")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @property
    def delay_seconds(self) -> float:
        return self.delay_between_requests / 1000.0

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]], config: Optional[Config] = None) -> RunInput:
        """
        Validate raw input, converting pydantic errors into InputValidationError.

        When ``config`` is given, its pipeline delay and retry count fill in
        values the input leaves out.
        """
        if not data:
            raise InputValidationError('Input must contain a "urls" array with at least one URL')

        values = dict(data)
        if config is not None:
            fallbacks = {
                ("delayBetweenRequests", "delay_between_requests"): config.pipeline.delay_between_requests_ms,
                ("maxRetries", "max_retries"): config.retry.max_retries,
            }
            for keys, fallback in fallbacks.items():
                if not any(key in values for key in keys):
                    values[keys[0]] = fallback

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            problems = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
            ]
            raise InputValidationError("Invalid run input: " + "; ".join(problems), problems) from e

    @classmethod
    def from_json_file(cls, path: Path, config: Optional[Config] = None) -> RunInput:
        return cls.from_mapping(read_input_file(path), config)


def read_input_file(path: Path) -> Dict[str, Any]:
    """Read a run input JSON object without validating its fields."""
    if not path.is_file():
        raise InputValidationError(f"Input file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InputValidationError(f"Input file is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InputValidationError("Input file must contain a JSON object")
    return data
