"""Per-category gallery state.

Each category owns exactly one ``AssetRecord``. Records move through
``idle -> loading -> success | error`` and back to ``loading`` on retry. Every
``begin`` hands out a fresh generation token; completions that carry an older
token are stale and are dropped instead of overwriting the newer request.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from ..assets.categories import AssetCategory, all_categories
from ..style.analysis import StyleDescription

IDLE = "idle"
LOADING = "loading"
SUCCESS = "success"
ERROR = "error"
STATUSES = (IDLE, LOADING, SUCCESS, ERROR)


@dataclass
class AssetRecord:
    category: AssetCategory
    image_data: str = ""
    status: str = IDLE
    error_message: str | None = None
    generation: int = 0

    def check_invariants(self) -> None:
        if self.status not in STATUSES:
            raise ValueError(f"Unknown status {self.status!r}")
        if bool(self.image_data) != (self.status == SUCCESS):
            raise ValueError(f"{self.category.value}: image_data must be set only on success")
        if (self.error_message is not None) != (self.status == ERROR):
            raise ValueError(f"{self.category.value}: error_message must be set only on error")

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "status": self.status,
            "error": self.error_message,
            "generation": self.generation,
            "has_image": bool(self.image_data),
        }


class GallerySession:
    def __init__(self) -> None:
        self.reference_image: str | None = None
        self.user_note: str = ""
        self.analysis: StyleDescription | None = None
        self.analysis_error: str | None = None
        self.analyzing = False
        self._records = {category: AssetRecord(category=category) for category in all_categories()}
        self._lock = threading.Lock()

    @property
    def records(self) -> Mapping[AssetCategory, AssetRecord]:
        return MappingProxyType(self._records)

    def record(self, category: AssetCategory) -> AssetRecord:
        return self._records[category]

    def set_reference(self, image: str) -> None:
        with self._lock:
            self.reference_image = image

    def set_note(self, note: str) -> None:
        with self._lock:
            self.user_note = str(note or "")

    def begin_analysis(self) -> None:
        with self._lock:
            self.analyzing = True
            self.analysis_error = None

    def finish_analysis(self, analysis: StyleDescription) -> None:
        with self._lock:
            self.analysis = analysis
            self.analyzing = False

    def fail_analysis(self, message: str) -> None:
        with self._lock:
            self.analysis_error = message
            self.analyzing = False

    def begin(self, category: AssetCategory) -> int:
        with self._lock:
            record = self._records[category]
            record.generation += 1
            record.status = LOADING
            record.image_data = ""
            record.error_message = None
            return record.generation

    def succeed(self, category: AssetCategory, token: int, image_data: str) -> bool:
        if not image_data:
            raise ValueError("image_data must not be empty")
        with self._lock:
            record = self._records[category]
            if token != record.generation:
                return False
            record.image_data = image_data
            record.status = SUCCESS
            record.error_message = None
            return True

    def fail(self, category: AssetCategory, token: int, message: str) -> bool:
        with self._lock:
            record = self._records[category]
            if token != record.generation:
                return False
            record.image_data = ""
            record.status = ERROR
            record.error_message = message
            return True

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "has_reference": bool(self.reference_image),
                "note": self.user_note,
                "analyzing": self.analyzing,
                "analysis": self.analysis.to_dict() if self.analysis else None,
                "analysis_error": self.analysis_error,
                "assets": {category.value: record.to_dict() for category, record in self._records.items()},
            }
