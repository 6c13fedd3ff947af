import asyncio
import unittest
from typing import Optional

from chatdrive.controller import InMemoryLogTransport
from chatdrive.errors import FetchFailedError, InvalidArgumentError, NetworkError
from chatdrive.models import EntryKind, RawEntry
from chatdrive.reader import LogReader
from chatdrive.view import FolderNavigator


class _GatedTransport(InMemoryLogTransport):
    """Holds the next fetch until `release` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.gate_next = False
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def fetch_recent_entries(self, page_size_limit: int, *, offset: Optional[int] = None):
        if self.gate_next:
            self.gate_next = False
            self.entered.set()
            await self.release.wait()
        return await super().fetch_recent_entries(page_size_limit, offset=offset)


class TestFolderNavigator(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.transport = _GatedTransport()
        for entry in (
            RawEntry(kind=EntryKind.TEXT, entry_id="1", text="folder:Photos"),
            RawEntry(kind=EntryKind.BINARY, entry_id="A", blob_ref="A", caption="parent:1"),
            RawEntry(kind=EntryKind.BINARY, entry_id="B", blob_ref="B"),
        ):
            self.transport.add_entry(entry)
        self.nav = FolderNavigator(LogReader(self.transport))

    async def test_starts_at_root(self) -> None:
        view = await self.nav.refresh()

        self.assertIsNone(view.folder_id)
        self.assertEqual([r.id for r in view.items], ["1", "B"])
        self.assertFalse(view.can_go_back)

    async def test_navigate_and_back(self) -> None:
        view = await self.nav.navigate("1")
        self.assertEqual(view.folder_id, "1")
        self.assertEqual([r.id for r in view.items], ["A"])
        self.assertTrue(view.can_go_back)
        self.assertEqual(self.nav.history, (None,))

        view = await self.nav.navigate_back()
        self.assertIsNone(view.folder_id)
        self.assertEqual([r.id for r in view.items], ["1", "B"])
        self.assertEqual(self.nav.history, ())

    async def test_back_at_root_is_noop(self) -> None:
        self.assertIsNone(await self.nav.navigate_back())
        self.assertIsNone(self.nav.current_folder_id)
        self.assertEqual(self.transport.calls, [])

    async def test_navigate_rejects_empty_id(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            await self.nav.navigate("")

    async def test_stale_listing_is_dropped(self) -> None:
        self.transport.gate_next = True
        slow = asyncio.create_task(self.nav.navigate("1"))
        await self.transport.entered.wait()

        root = await self.nav.navigate_back()
        self.transport.release.set()
        stale = await slow

        self.assertIsNone(stale)
        self.assertIsNone(self.nav.current_folder_id)
        self.assertEqual([r.id for r in root.items], ["1", "B"])
        self.assertEqual([r.id for r in self.nav.items], ["1", "B"])

    async def test_stale_error_is_dropped(self) -> None:
        self.transport.gate_next = True
        slow = asyncio.create_task(self.nav.navigate("1"))
        await self.transport.entered.wait()

        await self.nav.navigate_back()
        self.transport.fail_next("fetch_recent_entries", NetworkError("reset"))
        self.transport.release.set()

        self.assertIsNone(await slow)
        self.assertEqual([r.id for r in self.nav.items], ["1", "B"])

    async def test_late_listing_for_revisited_folder_is_dropped(self) -> None:
        self.transport.gate_next = True
        slow = asyncio.create_task(self.nav.navigate("1"))
        await self.transport.entered.wait()

        await self.nav.navigate_back()
        fresh = await self.nav.navigate("1")
        self.transport.release.set()

        self.assertIsNone(await slow)
        self.assertEqual(self.nav.current_folder_id, "1")
        self.assertIs(self.nav.items, fresh.items)

    async def test_error_for_current_folder_propagates(self) -> None:
        self.transport.fail_next("fetch_recent_entries", NetworkError("reset"))

        with self.assertRaises(FetchFailedError):
            await self.nav.navigate("1")
        self.assertEqual(self.nav.current_folder_id, "1")
        self.assertEqual(self.nav.items, ())


if __name__ == "__main__":
    unittest.main()
