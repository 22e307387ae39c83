"""
Enrichment pipeline for parsed vocabulary entries.

- records: expand entries into exported records using lookup data
- scheduler: bounded-concurrency lookup runner with pause/resume/cancel

The scheduler module orchestrates lookups for all input files in a run.
"""

from vocabenrich.enrich.records import (
    EnrichedRecord,
    build_records,
    format_translation,
)
from vocabenrich.enrich.scheduler import (
    EnrichmentScheduler,
    FileResult,
    LogEvent,
    RunPhase,
    RunStatus,
    SourceFile,
)

__all__ = [
    "EnrichedRecord",
    "build_records",
    "format_translation",
    "EnrichmentScheduler",
    "FileResult",
    "LogEvent",
    "RunPhase",
    "RunStatus",
    "SourceFile",
]
