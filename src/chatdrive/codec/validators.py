"""Creation-time validation for values that end up in wire payloads."""

from __future__ import annotations

from typing import Optional

from chatdrive.errors import InvalidArgumentError

SEPARATOR: str = ":"


def validate_folder_name(name: str) -> None:
    """
    Reject folder names that cannot be declared unambiguously.

    The separator is forbidden outright: `folder:a:b` would otherwise read
    back as folder "a" under parent "b".
    """
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError("Folder name must be a non-empty string")
    if SEPARATOR in name:
        raise InvalidArgumentError(
            f"Folder name must not contain {SEPARATOR!r}",
            details={"name": name},
        )
    if "\n" in name or "\r" in name:
        raise InvalidArgumentError(
            "Folder name must be a single line",
            details={"name": name},
        )


def validate_file_name(name: str) -> None:
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError("File name must be a non-empty string")


def validate_parent_id(parent_id: Optional[str]) -> None:
    if parent_id is None:
        return
    if not isinstance(parent_id, str) or not parent_id.strip():
        raise InvalidArgumentError("parent_id must be None or a non-empty string")
    if any(ch.isspace() for ch in parent_id):
        raise InvalidArgumentError(
            "parent_id must not contain whitespace",
            details={"parent_id": parent_id},
        )
