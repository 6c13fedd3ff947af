"""Index over the records decoded from one page."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from chatdrive.models import FileRecord, FolderRecord, Record

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PageIndex:
    """
    Records of one page, in page order, with parent lookups.

    Indexes:
        - records_by_id
        - children_by_parent_id (None key = declared root)
        - folder_ids

    Parent links are not validated: a record may point at a parent that is
    outside the page, was never declared, or is the record itself. Such
    records are orphans and are listed at root. When an id occurs twice (a
    document re-sent with the same file id), the first occurrence is kept.
    """

    order: list[str] = field(default_factory=list)
    records_by_id: dict[str, Record] = field(default_factory=dict)
    children_by_parent_id: dict[Optional[str], list[str]] = field(default_factory=dict)
    folder_ids: set[str] = field(default_factory=set)

    @classmethod
    def from_records(cls, records: Iterable[Record]) -> PageIndex:
        index = cls()
        for record in records:
            index.add(record)
        return index

    # ----------------------------
    # Query helpers
    # ----------------------------
    def __len__(self) -> int:
        return len(self.order)

    def has(self, record_id: str) -> bool:
        return record_id in self.records_by_id

    def get(self, record_id: str) -> Record:
        return self.records_by_id[record_id]

    def records(self) -> list[Record]:
        return [self.records_by_id[rid] for rid in self.order]

    def is_orphan(self, record: Record) -> bool:
        """True if the record names itself or a parent that is not a folder of this page."""
        if record.parent_id is None:
            return False
        return record.parent_id == record.id or record.parent_id not in self.folder_ids

    def list_children(self, parent_id: Optional[str]) -> list[Record]:
        """
        Records listed under parent_id, in page order.

        parent_id=None is the root listing: declared root records plus orphans.
        Otherwise the records whose parent_id equals parent_id, except a
        folder declared as its own parent (listed at root instead).
        """
        if parent_id is not None:
            ids = self.children_by_parent_id.get(parent_id, [])
            return [self.records_by_id[rid] for rid in ids if rid != parent_id]

        return [
            record
            for record in self.records()
            if record.parent_id is None or self.is_orphan(record)
        ]

    # ----------------------------
    # Mutation helpers
    # ----------------------------
    def add(self, record: Record) -> None:
        if not isinstance(record, (FileRecord, FolderRecord)):
            raise TypeError(f"Unsupported record type: {type(record).__name__}")
        if record.id in self.records_by_id:
            logger.debug("Duplicate record id %s in page; keeping the first", record.id)
            return

        self.order.append(record.id)
        self.records_by_id[record.id] = record
        self.children_by_parent_id.setdefault(record.parent_id, []).append(record.id)

        if isinstance(record, FolderRecord):
            self.folder_ids.add(record.id)
