"""
Result sinks: where page records and domain summaries end up.
"""

from __future__ import annotations

import json
import logging
import os
import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from models.schema import PageRecord, QuerySummary

logger = logging.getLogger(__name__)

DATASET_FILENAME = "dataset.jsonl"


class ResultSink(ABC):
    """Receives every record the orchestrator produces."""

    @abstractmethod
    def write_page(self, record: PageRecord) -> None:
        ...

    @abstractmethod
    def write_summary(self, summary: QuerySummary, target: str) -> None:
        """Persist one domain summary; ``target`` is the normalized domain."""
        ...


class MemorySink(ResultSink):
    """Keeps records in memory (library use and tests)."""

    def __init__(self):
        self.pages: List[PageRecord] = []
        self.summaries: List[QuerySummary] = []

    def write_page(self, record: PageRecord) -> None:
        self.pages.append(record)

    def write_summary(self, summary: QuerySummary, target: str) -> None:
        self.summaries.append(summary)


class ResultWriter(ResultSink):
    """
    Writes one JSON file per record into ``output_dir``.

    File names:
      {query}_page_{page}_{stamp}.json           non-domain page records
      {query}_match_{domain}_{stamp}.json        domain summaries

    With ``dataset=True`` every page item and summary is also appended as one
    line to ``dataset.jsonl``.
    """

    def __init__(self, output_dir: str = "./output", dataset: bool = False):
        self.output_dir = output_dir
        self.dataset = dataset
        os.makedirs(output_dir, exist_ok=True)
        self.files_written: List[str] = []

    def write_page(self, record: PageRecord) -> None:
        filename = f"{_safe_name(record.query)}_page_{record.page}_{_file_stamp()}.json"
        data = record.to_dict()
        self._write_json(filename, data)

        if self.dataset:
            for item in data["items"]:
                self._append_dataset(
                    {"query": record.query, "page": record.page, "timestamp": data["timestamp"], **item}
                )

    def write_summary(self, summary: QuerySummary, target: str) -> None:
        safe_domain = re.sub(r"[^a-zA-Z0-9.-]", "_", target)
        filename = f"{_safe_name(summary.keyword)}_match_{safe_domain}_{_file_stamp()}.json"
        data = summary.to_dict()
        self._write_json(filename, data)

        if self.dataset:
            self._append_dataset(data)

    def _write_json(self, filename: str, data: Dict[str, Any]) -> str:
        path = os.path.join(self.output_dir, filename)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        self.files_written.append(path)
        logger.debug("Wrote %s", path)
        return path

    def _append_dataset(self, row: Dict[str, Any]) -> None:
        path = os.path.join(self.output_dir, DATASET_FILENAME)
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")


def _safe_name(text: str) -> str:
    """Replace every non-alphanumeric character with an underscore."""
    return re.sub(r"[^a-zA-Z0-9]", "_", text)


def _file_stamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return re.sub(r"[:.+]", "-", now.isoformat())
