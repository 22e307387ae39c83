#!/usr/bin/env python3
"""
export.py — Group enriched records into JSON payloads and write them.

Views over a run's FileResults (each repeatable, none modifies the results):
  - per_file():  one payload per source file, "<name>_parsed"
  - merged():    all records in file order, "vocabulary_merged"
  - batches(n):  merged records split into chunks of n, "vocabulary_batch_<i>"

Outputs:
  - <output_dir>/<payload name>.json (JSON array, 2-space indent, UTF-8)
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence

import orjson

from vocabenrich.enrich.records import EnrichedRecord
from vocabenrich.enrich.scheduler import FileResult

logger = logging.getLogger(__name__)

MERGED_NAME = "vocabulary_merged"
BATCH_NAME = "vocabulary_batch_{index}"
PER_FILE_SUFFIX = "_parsed"

_EXTENSION = re.compile(r'\.[^/.]+$')


@dataclass(frozen=True)
class ExportPayload:
    """A named list of records ready to be written."""
    name: str
    records: tuple

    def to_json(self) -> bytes:
        return orjson.dumps(
            [record.to_dict() for record in self.records],
            option=orjson.OPT_INDENT_2,
        )


def per_file_name(source_file_name: str) -> str:
    """'words.md' -> 'words_parsed'."""
    return _EXTENSION.sub('', source_file_name) + PER_FILE_SUFFIX


class ResultAggregator:
    """Read-only export views over the FileResults of a run."""

    def __init__(self, results: Iterable[FileResult]):
        self.results = [
            FileResult(r.source_file_name, list(r.records)) for r in results
        ]

    def all_records(self) -> List[EnrichedRecord]:
        return [record for result in self.results for record in result.records]

    def per_file(self) -> List[ExportPayload]:
        return [
            ExportPayload(per_file_name(r.source_file_name), tuple(r.records))
            for r in self.results
        ]

    def merged(self) -> ExportPayload:
        return ExportPayload(MERGED_NAME, tuple(self.all_records()))

    def batches(self, batch_size: int) -> List[ExportPayload]:
        """
        Split the merged records into consecutive chunks.

        Args:
            batch_size: Records per chunk (the last chunk may be shorter)

        Returns:
            Payloads named vocabulary_batch_1, vocabulary_batch_2, ...
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        records = self.all_records()
        return [
            ExportPayload(BATCH_NAME.format(index=i // batch_size + 1),
                          tuple(records[i:i + batch_size]))
            for i in range(0, len(records), batch_size)
        ]


def output_path(output_dir: Path, name: str) -> Path:
    filename = name if name.endswith('.json') else f"{name}.json"
    return output_dir / filename


def write_payloads(payloads: Sequence[ExportPayload], output_dir: Path) -> List[Path]:
    """Write each payload to <output_dir>/<name>.json and return the paths."""
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for payload in payloads:
        path = output_path(output_dir, payload.name)
        with open(path, 'wb') as f:
            f.write(payload.to_json())
            f.write(b'\n')
        logger.info(f"  -> {path} ({len(payload.records):,} records)")
        paths.append(path)

    return paths
