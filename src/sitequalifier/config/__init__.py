"""Configuration models and the per-run input."""

from .config import (
    ClassifierConfig,
    Config,
    MonitoringConfig,
    PipelineConfig,
    RetryConfig,
    RunInput,
    ScraperConfig,
    StorageConfig,
    find_config_file,
    load_config,
    read_input_file,
)

__all__ = [
    "ClassifierConfig",
    "Config",
    "MonitoringConfig",
    "PipelineConfig",
    "RetryConfig",
    "RunInput",
    "ScraperConfig",
    "StorageConfig",
    "find_config_file",
    "load_config",
    "read_input_file",
]
