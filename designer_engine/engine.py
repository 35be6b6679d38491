"""Core designer engine orchestration."""

from __future__ import annotations

import base64
import threading
import time
import uuid
from concurrent.futures import Future, as_completed
from pathlib import Path

from .assets.categories import AssetCategory, all_categories, category_spec
from .assets.generator import build_asset_request, request_asset
from .gallery.state import ERROR, SUCCESS, GallerySession
from .providers import default_registry
from .providers.base import DesignProvider, ProviderRegistry
from .providers.google_utils import decode_image_payload, to_png_data_uri
from .runs.events import EventWriter
from .style.analysis import StyleDescription, request_analysis


class DesignerEngine:
    def __init__(
        self,
        run_dir: Path,
        events_path: Path | None = None,
        provider: str = "gemini",
        provider_registry: ProviderRegistry | None = None,
    ) -> None:
        self.run_dir = run_dir
        self.run_dir.mkdir(parents=True, exist_ok=True)
        self.session_id = run_dir.name or str(uuid.uuid4())
        self.events = EventWriter(events_path or run_dir / "events.jsonl", self.session_id)
        self.providers = provider_registry or default_registry()
        resolved = self.providers.get(provider)
        if resolved is None:
            raise RuntimeError(f"No provider available for {provider}")
        self.provider: DesignProvider = resolved
        self.session = GallerySession()
        self._threads: list[threading.Thread] = []
        self._threads_lock = threading.Lock()
        self.events.emit("run_started", out_dir=str(self.run_dir), provider=self.provider.name)

    def set_reference(self, image: str) -> None:
        self.session.set_reference(image)
        self.events.emit("reference_set", chars=len(image or ""))

    def set_reference_path(self, path: Path) -> None:
        data = path.read_bytes()
        mime = _mime_type_for_suffix(path.suffix)
        self.set_reference(f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}")

    def set_note(self, note: str) -> None:
        self.session.set_note(note)

    def analyze(self) -> StyleDescription | None:
        """Run the style analysis for the current reference image.

        Failures are recorded on the session and in the event stream and
        ``None`` is returned; the asset records are left untouched.
        """
        image = self.session.reference_image
        if not image:
            return None
        self.session.begin_analysis()
        self.events.emit("analysis_started", provider=self.provider.name)
        started_at = time.monotonic()
        try:
            response = request_analysis(image, self.provider)
        except Exception as exc:
            message = _error_message(exc)
            self.session.fail_analysis(message)
            self.events.emit("analysis_failed", error=message, error_type=type(exc).__name__)
            return None
        analysis = StyleDescription.from_text(response.text)
        self.session.finish_analysis(analysis)
        self.events.emit(
            "analysis_completed",
            elapsed_s=round(time.monotonic() - started_at, 3),
            fallback=not response.text,
            keywords=list(analysis.keywords),
            provider_request=response.provider_request,
            provider_response=response.provider_response,
        )
        return analysis

    def start_design_process(self) -> dict[AssetCategory, Future] | None:
        analysis = self.analyze()
        if analysis is None:
            return None
        return self.fan_out(analysis.text)

    def fan_out(self, style_text: str) -> dict[AssetCategory, Future]:
        return {category: self._submit(category, style_text) for category in all_categories()}

    def regenerate(self, category: AssetCategory, style_text: str | None = None) -> Future | None:
        resolved = style_text or (self.session.analysis.text if self.session.analysis else None)
        if not resolved:
            return None
        return self._submit(category, resolved)

    def wait(self, futures: dict[AssetCategory, Future]) -> dict[AssetCategory, str]:
        statuses: dict[AssetCategory, str] = {}
        future_map = {future: category for category, future in futures.items()}
        for future in as_completed(future_map):
            statuses[future_map[future]] = future.result()
        return statuses

    def asset_bytes(self, category: AssetCategory) -> bytes | None:
        record = self.session.record(category)
        if record.status != SUCCESS:
            return None
        return decode_image_payload(record.image_data)

    def save_asset(self, category: AssetCategory, out_dir: Path | None = None) -> Path | None:
        data = self.asset_bytes(category)
        if data is None:
            return None
        target_dir = out_dir or self.run_dir
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / category_spec(category).download_name
        path.write_bytes(data)
        self.events.emit("asset_saved", category=category.value, path=str(path), byte_count=len(data))
        return path

    def close(self, timeout: float | None = None) -> None:
        with self._threads_lock:
            threads = list(self._threads)
        for thread in threads:
            thread.join(timeout)

    def _submit(self, category: AssetCategory, style_text: str) -> Future:
        token = self.session.begin(category)
        note = self.session.user_note
        reference = self.session.reference_image
        self.events.emit(
            "asset_generation_started",
            category=category.value,
            generation=token,
            style_chars=len(style_text),
            note_chars=len(note),
        )
        # One thread per request; nothing is queued behind an in-flight call.
        future: Future = Future()
        thread = threading.Thread(
            target=self._resolve,
            args=(future, category, token, style_text, note, reference),
            name=f"designer-asset-{category.value}-{token}",
            daemon=True,
        )
        with self._threads_lock:
            self._threads = [item for item in self._threads if item.is_alive()]
            self._threads.append(thread)
            thread.start()
        return future

    def _resolve(
        self,
        future: Future,
        category: AssetCategory,
        token: int,
        style_text: str,
        note: str,
        reference: str | None,
    ) -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(self._run_generation(category, token, style_text, note, reference))
        except Exception as exc:
            future.set_exception(exc)

    def _run_generation(
        self,
        category: AssetCategory,
        token: int,
        style_text: str,
        note: str,
        reference: str | None,
    ) -> str:
        request = build_asset_request(category, style_text, note, reference)
        started_at = time.monotonic()
        try:
            response = request_asset(request, self.provider)
        except Exception as exc:
            message = _error_message(exc)
            if not self.session.fail(category, token, message):
                self._emit_discarded(category, token, "error")
                return self.session.record(category).status
            self.events.emit(
                "asset_generation_failed",
                category=category.value,
                generation=token,
                error=message,
                error_type=type(exc).__name__,
            )
            return ERROR
        image_data = to_png_data_uri(response.image.data)
        if not self.session.succeed(category, token, image_data):
            self._emit_discarded(category, token, "success")
            return self.session.record(category).status
        self.events.emit(
            "asset_generated",
            category=category.value,
            generation=token,
            elapsed_s=round(time.monotonic() - started_at, 3),
            width=response.image.width,
            height=response.image.height,
            warnings=response.warnings,
            provider_request=response.provider_request,
            provider_response=response.provider_response,
        )
        return SUCCESS

    def _emit_discarded(self, category: AssetCategory, token: int, outcome: str) -> None:
        self.events.emit(
            "asset_response_discarded",
            category=category.value,
            generation=token,
            current_generation=self.session.record(category).generation,
            outcome=outcome,
        )


def _error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _mime_type_for_suffix(suffix: str) -> str:
    lowered = str(suffix or "").strip().lower()
    if lowered in {".jpg", ".jpeg"}:
        return "image/jpeg"
    if lowered == ".webp":
        return "image/webp"
    return "image/png"
