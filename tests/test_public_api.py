import unittest

import chatdrive


class TestPublicApi(unittest.TestCase):
    def test_top_level_exports_exist(self) -> None:
        self.assertTrue(hasattr(chatdrive, "ChatDriveManager"))
        self.assertTrue(hasattr(chatdrive, "PlacementCoordinator"))
        self.assertTrue(hasattr(chatdrive, "LogReader"))
        self.assertTrue(hasattr(chatdrive, "FolderNavigator"))
        self.assertTrue(hasattr(chatdrive, "BotCredentials"))

        self.assertTrue(hasattr(chatdrive, "TelegramBotController"))
        self.assertTrue(hasattr(chatdrive, "InMemoryLogTransport"))
        self.assertTrue(hasattr(chatdrive, "FileRecord"))
        self.assertTrue(hasattr(chatdrive, "FolderRecord"))

        self.assertTrue(hasattr(chatdrive, "ChatDriveError"))
        self.assertTrue(hasattr(chatdrive, "UploadFailedError"))

    def test___all___is_defined(self) -> None:
        self.assertTrue(hasattr(chatdrive, "__all__"))
        self.assertIn("ChatDriveManager", chatdrive.__all__)
        self.assertIn("ChatDriveError", chatdrive.__all__)
        for name in chatdrive.__all__:
            self.assertTrue(hasattr(chatdrive, name), name)


if __name__ == "__main__":
    unittest.main()
