"""ChatDriveManager: public entry point tying transport, reader and coordinator."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from chatdrive.auth import BotCredentials
from chatdrive.codec import validate_file_name, validate_parent_id
from chatdrive.config import StoreSettings
from chatdrive.controller import LogTransport, TelegramBotController
from chatdrive.coordinator import PlacementCoordinator
from chatdrive.errors import InvalidArgumentError, UploadFailedError
from chatdrive.models import (
    BatchUploadResult,
    FileRecord,
    FolderRecord,
    Record,
    UploadResult,
)
from chatdrive.reader import LogReader
from chatdrive.util.ids import recording_file_name
from chatdrive.util.progress import PercentCallback
from chatdrive.view import FolderNavigator

logger = logging.getLogger(__name__)

BatchProgressCallback = Callable[[str, int], None]


class ChatDriveManager:
    """
    High-level store over one chat.

    Usage:
        async with ChatDriveManager(BotCredentials.from_env()) as drive:
            photos = await drive.create_folder("Photos")
            await drive.create_file(data, "a.png", parent_id=photos.id)
            items = await drive.list_folder(photos.id)
    """

    def __init__(
        self,
        credentials: BotCredentials,
        *,
        settings: Optional[StoreSettings] = None,
    ) -> None:
        settings = settings or StoreSettings()
        controller = TelegramBotController(credentials, settings=settings)
        self._init(controller, settings)

    @classmethod
    def from_transport(
        cls,
        transport: LogTransport,
        *,
        settings: Optional[StoreSettings] = None,
    ) -> "ChatDriveManager":
        """Create manager with an injected transport (useful for tests)."""
        obj = cls.__new__(cls)
        obj._init(transport, settings or StoreSettings())
        return obj

    def _init(self, transport: Any, settings: StoreSettings) -> None:
        self._transport = transport
        self._settings = settings
        self._reader = LogReader(transport, page_size_limit=settings.page_size_limit)
        self._coordinator = PlacementCoordinator(transport)

    # ----------------------------
    # Lifecycle
    # ----------------------------
    async def __aenter__(self) -> "ChatDriveManager":
        enter = getattr(self._transport, "__aenter__", None)
        if enter is not None:
            await enter()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the transport's network clients, if it owns any."""
        shutdown = getattr(self._transport, "shutdown", None)
        if shutdown is not None:
            await shutdown()

    # ----------------------------
    # Components
    # ----------------------------
    @property
    def reader(self) -> LogReader:
        return self._reader

    @property
    def coordinator(self) -> PlacementCoordinator:
        return self._coordinator

    def navigator(self) -> FolderNavigator:
        """Return a fresh navigator positioned at root."""
        return FolderNavigator(self._reader)

    # ----------------------------
    # Store operations
    # ----------------------------
    async def list_folder(self, folder_id: Optional[str] = None) -> list[Record]:
        return await self._reader.list_folder(folder_id)

    async def create_folder(self, name: str, parent_id: Optional[str] = None) -> FolderRecord:
        return await self._coordinator.create_folder(name, parent_id)

    async def create_file(
        self,
        payload: bytes,
        name: str,
        parent_id: Optional[str] = None,
        on_progress: Optional[PercentCallback] = None,
    ) -> FileRecord:
        return await self._coordinator.create_file(payload, name, parent_id, on_progress)

    async def upload_recording(
        self,
        payload: bytes,
        parent_id: Optional[str] = None,
        on_progress: Optional[PercentCallback] = None,
    ) -> FileRecord:
        """Upload a captured recording under a generated video_<ms>.webm name."""
        return await self._coordinator.create_file(
            payload, recording_file_name(), parent_id, on_progress
        )

    async def upload_many(
        self,
        files: Sequence[tuple[str, bytes]],
        parent_id: Optional[str] = None,
        on_progress: Optional[BatchProgressCallback] = None,
    ) -> BatchUploadResult:
        """
        Upload several (name, payload) pairs into one folder, one at a time.

        Policy:
            - A failed item is recorded and the batch continues.
            - Invalid arguments are raised before anything is uploaded.
        """
        if not files:
            raise InvalidArgumentError("files must not be empty")
        for item in files:
            if not isinstance(item, tuple) or len(item) != 2:
                raise InvalidArgumentError("files must contain (name, payload) pairs")
            validate_file_name(item[0])
            if not isinstance(item[1], (bytes, bytearray, memoryview)):
                raise InvalidArgumentError(
                    "payload must be bytes",
                    details={"name": item[0]},
                )
        validate_parent_id(parent_id)

        results: list[UploadResult] = []
        for name, payload in files:
            callback = _bind_name(on_progress, name)
            try:
                record = await self._coordinator.create_file(payload, name, parent_id, callback)
                results.append(UploadResult(name=name, status="success", record=record))
            except UploadFailedError as exc:
                logger.warning("Upload of %r failed: %s", name, exc)
                results.append(_failed_result(name, exc))

        summary = _summarize_results(results)
        if summary["failed"] == 0:
            status = "success"
        elif summary["success"] == 0:
            status = "failed"
        else:
            status = "partial"

        return BatchUploadResult(status=status, results=results, summary=summary)  # type: ignore[arg-type]


def _bind_name(
    on_progress: Optional[BatchProgressCallback],
    name: str,
) -> Optional[PercentCallback]:
    if on_progress is None:
        return None

    def callback(percent: int) -> None:
        on_progress(name, percent)

    return callback


def _failed_result(name: str, exc: UploadFailedError) -> UploadResult:
    return UploadResult(
        name=name,
        status="failed",
        error_type=exc.kind,
        error_message=str(exc),
        error_details=dict(exc.details),
    )


def _summarize_results(results: list[UploadResult]) -> dict[str, int]:
    summary: dict[str, int] = {"success": 0, "failed": 0}
    for r in results:
        summary[r.status] = summary.get(r.status, 0) + 1
    return summary
