"""Core module for the Print Request Pipeline."""

from .models import EmailRecord, AnalyzedEmailRecord, AIExtractionResult, AnalysisResult
from .archive_scraper import ArchiveScraper, ScrapeStopReason, extract_content, normalize_content, parse_listing
from .field_analyzer import FieldAnalyzer, build_extraction_prompt, strip_code_fence
from .sheet_writer import SheetWriter, build_grid
from .pipeline_orchestrator import PrintRequestPipeline, PipelineResult, create_pipeline

__all__ = [
    "EmailRecord",
    "AnalyzedEmailRecord",
    "AIExtractionResult",
    "AnalysisResult",
    "ArchiveScraper",
    "ScrapeStopReason",
    "extract_content",
    "normalize_content",
    "parse_listing",
    "FieldAnalyzer",
    "build_extraction_prompt",
    "strip_code_fence",
    "SheetWriter",
    "build_grid",
    "PrintRequestPipeline",
    "PipelineResult",
    "create_pipeline",
]
