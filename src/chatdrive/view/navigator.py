"""FolderNavigator: one-folder-at-a-time view with back navigation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from chatdrive.errors import FetchFailedError, InvalidArgumentError
from chatdrive.models import Record
from chatdrive.reader import LogReader

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FolderView:
    """What a caller renders for the current folder."""

    folder_id: Optional[str]
    items: tuple[Record, ...]
    can_go_back: bool


class FolderNavigator:
    """
    Navigation state over the log's folder tree.

    State:
        current_folder_id: None for root
        history: stack of previously visited folder ids

    Each fetch is tagged with the folder it was issued for and a sequence
    number. Only the latest fetch for the current folder is applied: an
    earlier one that completes late (the caller navigated elsewhere, or back
    to the same folder) is dropped, error included, and refresh() returns None.
    """

    def __init__(self, reader: LogReader) -> None:
        self._reader = reader
        self._current_folder_id: Optional[str] = None
        self._history: list[Optional[str]] = []
        self._items: tuple[Record, ...] = ()
        self._fetch_seq = 0

    @property
    def current_folder_id(self) -> Optional[str]:
        return self._current_folder_id

    @property
    def history(self) -> tuple[Optional[str], ...]:
        return tuple(self._history)

    @property
    def items(self) -> tuple[Record, ...]:
        return self._items

    @property
    def can_go_back(self) -> bool:
        return bool(self._history)

    def view(self) -> FolderView:
        return FolderView(
            folder_id=self._current_folder_id,
            items=self._items,
            can_go_back=self.can_go_back,
        )

    async def navigate(self, folder_id: str) -> Optional[FolderView]:
        """Enter folder_id and fetch its listing."""
        if not isinstance(folder_id, str) or not folder_id:
            raise InvalidArgumentError("folder_id must be a non-empty string")

        self._history.append(self._current_folder_id)
        self._set_current(folder_id)
        return await self.refresh()

    async def navigate_back(self) -> Optional[FolderView]:
        """Return to the previous folder. At root with no history this does nothing."""
        if not self._history:
            return None

        self._set_current(self._history.pop())
        return await self.refresh()

    async def refresh(self) -> Optional[FolderView]:
        """
        Fetch the current folder.

        Raises:
            FetchFailedError: if the fetch for the still-current folder fails.
        """
        self._fetch_seq += 1
        seq = self._fetch_seq
        tag = self._current_folder_id
        try:
            records = await self._reader.list_folder(tag)
        except FetchFailedError:
            if self._is_stale(tag, seq):
                logger.debug("Dropping failed fetch for %s (now at %s)", tag, self._current_folder_id)
                return None
            raise

        if self._is_stale(tag, seq):
            logger.debug("Dropping stale listing for %s (now at %s)", tag, self._current_folder_id)
            return None

        self._items = tuple(records)
        return self.view()

    def _is_stale(self, tag: Optional[str], seq: int) -> bool:
        return tag != self._current_folder_id or seq != self._fetch_seq

    def _set_current(self, folder_id: Optional[str]) -> None:
        self._current_folder_id = folder_id
        self._items = ()
