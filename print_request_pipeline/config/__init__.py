"""Configuration module for the Print Request Pipeline."""

from .settings import (
    get_pipeline_config,
    ScraperConfig,
    AnalyzerConfig,
    SheetsConfig,
    PipelineConfig,
)

__all__ = [
    "get_pipeline_config",
    "ScraperConfig",
    "AnalyzerConfig",
    "SheetsConfig",
    "PipelineConfig",
]
