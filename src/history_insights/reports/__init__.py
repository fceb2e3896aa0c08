"""Chunked classification jobs and report aggregation."""

from history_insights.reports.aggregator import aggregate_reports
from history_insights.reports.chunks import ChunkReportStore
from history_insights.reports.classifier import BaseClassifier, LLMClassifier, extract_json_object
from history_insights.reports.daily import DailyReportCache
from history_insights.reports.progress import AdvanceResult, ChunkProgressTracker

__all__ = [
    "aggregate_reports",
    "ChunkReportStore",
    "BaseClassifier",
    "LLMClassifier",
    "extract_json_object",
    "DailyReportCache",
    "AdvanceResult",
    "ChunkProgressTracker",
]
