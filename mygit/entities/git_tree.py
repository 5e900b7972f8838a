from __future__ import annotations

import enum
import logging
from pathlib import PurePath
from typing import NamedTuple, Iterable, Iterator

from mygit.entities.directory_listing import DirEntry, DirectoryListing, LocalFilesystem
from mygit.entities.git_object import GitObject, ObjectType
from mygit.errors import MalformedObject
from mygit.object_store import ObjectStore
from mygit.utils import ByteReader

_logger = logging.getLogger(__name__)

# Hash 40 chars, encoded in hex, is 20 bytes
RAW_OBJECT_ID_SIZE = 20


class FileMode(str, enum.Enum):
    DIRECTORY = "40000"
    # Submodule entry pointing at a commit, only found in trees written by git
    GITLINK = "160000"

    def __str__(self):
        return self.value


def file_mode(permissions: int) -> str:
    # Regular files are "100" followed by the permission bits in octal
    return f"100{permissions & 0o777:03o}"


class TreeItem(NamedTuple):
    file_mode: str
    file_name: str
    object_id: str

    @property
    def object_type(self) -> ObjectType:
        if self.file_mode == FileMode.DIRECTORY:
            return ObjectType.TREE
        if self.file_mode == FileMode.GITLINK:
            return ObjectType.COMMIT
        return ObjectType.BLOB


def iterate_tree(content: bytes) -> Iterator[TreeItem]:
    """
    Yield the entries of a tree payload in stored order.

    Each entry is `<mode> <name>\\0<20 byte object id>`; an entry cut short
    anywhere raises MalformedObject.
    """
    reader = ByteReader(content)
    while not reader.at_end():
        mode = reader.read_until(b" ")
        name = reader.read_until(b"\0")
        object_id = reader.read_exact(RAW_OBJECT_ID_SIZE)

        if not mode or not mode.isdigit():
            raise MalformedObject(f"invalid tree entry mode {mode!r}")
        if not name:
            raise MalformedObject("tree entry has an empty name")

        yield TreeItem(mode.decode("ascii"), name.decode("utf-8", "surrogateescape"), object_id.hex())


class Tree(NamedTuple):
    items: tuple[TreeItem, ...]

    @staticmethod
    def from_git_object(git_object: GitObject) -> Tree:
        if git_object.object_type != ObjectType.TREE:
            raise MalformedObject(f"expected a tree, got a {git_object.object_type}")

        return Tree(tuple(iterate_tree(git_object.content)))

    def to_git_object(self) -> GitObject:
        content = bytearray()
        for tree_item in self.items:
            content.extend(f"{tree_item.file_mode} {tree_item.file_name}".encode("utf-8", "surrogateescape"))
            content.extend(b"\0")
            content.extend(bytes.fromhex(tree_item.object_id))

        return GitObject(ObjectType.TREE, bytes(content))


def _sort_key(entry: DirEntry) -> bytes:
    # Git compares the encoded names byte by byte, directories as if they ended with a slash
    name = entry.name.encode("utf-8", "surrogateescape")
    return name + b"/" if entry.is_dir else name


def build_tree(store: ObjectStore, current_dir: PurePath, listing: DirectoryListing | None = None) -> str:
    """
    Store every file under current_dir as a blob, every directory as a tree,
    and return the object id of the tree for current_dir itself.

    Any directory named like the store's own metadata directory is skipped;
    a plain file with that name is kept. Entries are written in canonical order, so the same content gives
    the same tree id whatever order the listing returns. Empty directories
    become the empty tree.
    """
    if listing is None:
        listing = LocalFilesystem()

    tree_items = list()
    for child in sorted(listing.list_dir(current_dir), key=_sort_key):
        if child.is_dir and child.name == store.dot_git.name:
            _logger.debug("skip %s directory", child.name)
            continue

        if child.is_dir:
            object_id = build_tree(store, child.path, listing)
            mode = str(FileMode.DIRECTORY)
        else:
            git_object = GitObject(ObjectType.BLOB, listing.read_file(child.path))
            object_id = store.store(git_object)
            mode = file_mode(child.permissions)
            _logger.debug("Write blob: %s", child.path)

        tree_items.append(TreeItem(mode, child.name, object_id))
        _logger.debug("entry: %s %s %s", mode, child.name, object_id)

    object_id = store.store(Tree(tuple(tree_items)).to_git_object())
    _logger.debug("Write tree: %s", current_dir)
    return object_id


def format_tree(tree: Tree, name_only: bool = False) -> Iterable[str]:
    for item in tree.items:
        if name_only:
            yield item.file_name
        else:
            yield f"{item.file_mode.zfill(6)} {item.object_type} {item.object_id}\t{item.file_name}"
