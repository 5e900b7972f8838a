from __future__ import annotations

import os
import stat
from pathlib import Path, PurePath, PurePosixPath
from typing import NamedTuple, Protocol


class DirEntry(NamedTuple):
    name: str
    path: PurePath
    is_dir: bool
    # Permission bits only, e.g. 0o644
    permissions: int


class DirectoryListing(Protocol):
    def list_dir(self, directory: PurePath) -> list[DirEntry]:
        ...

    def read_file(self, path: PurePath) -> bytes:
        ...


class LocalFilesystem:
    """Lists directories on disk. Symlinks are followed, so a broken one fails the listing."""

    def list_dir(self, directory: PurePath) -> list[DirEntry]:
        entries = []
        with os.scandir(directory) as it:
            for entry in it:
                st = entry.stat()
                entries.append(DirEntry(entry.name, Path(entry.path), stat.S_ISDIR(st.st_mode), stat.S_IMODE(st.st_mode)))
        return entries

    def read_file(self, path: PurePath) -> bytes:
        with open(path, "rb") as f:
            return f.read()


class InMemoryDirectory:
    """
    Directory fixture backed by nested dicts.

    A value is either a dict (subdirectory), bytes (file with mode 644) or a
    (bytes, permissions) tuple:

        InMemoryDirectory({
            "hello.txt": b"world",
            "run.sh": (b"#!/bin/sh\n", 0o755),
            "sub": {},
        })

    Paths are relative to the fixture root, which is PurePosixPath().
    """

    DIRECTORY_PERMISSIONS = 0o755
    FILE_PERMISSIONS = 0o644

    def __init__(self, contents: dict):
        self.contents = contents

    @property
    def root(self) -> PurePosixPath:
        return PurePosixPath()

    def _lookup(self, path: PurePath):
        node = self.contents
        for part in PurePosixPath(path).parts:
            if not isinstance(node, dict) or part not in node:
                raise FileNotFoundError(f"No such file or directory: '{path}'")
            node = node[part]
        return node

    def list_dir(self, directory: PurePath) -> list[DirEntry]:
        node = self._lookup(directory)
        if not isinstance(node, dict):
            raise NotADirectoryError(f"Not a directory: '{directory}'")

        entries = []
        for name, child in node.items():
            child_path = PurePosixPath(directory) / name
            if isinstance(child, dict):
                entries.append(DirEntry(name, child_path, True, self.DIRECTORY_PERMISSIONS))
            elif isinstance(child, tuple):
                entries.append(DirEntry(name, child_path, False, child[1]))
            else:
                entries.append(DirEntry(name, child_path, False, self.FILE_PERMISSIONS))
        return entries

    def read_file(self, path: PurePath) -> bytes:
        node = self._lookup(path)
        if isinstance(node, dict):
            raise IsADirectoryError(f"Is a directory: '{path}'")
        if isinstance(node, tuple):
            return node[0]
        return node
