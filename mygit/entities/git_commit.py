from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import NamedTuple

from mygit.entities.git_object import GitObject, ObjectType
from mygit.errors import MalformedObject
from mygit.object_store import ObjectStore

_logger = logging.getLogger(__name__)

DEFAULT_AUTHOR_NAME = "Ladicle"
DEFAULT_AUTHOR_EMAIL = "dummy@example.com"


def _format_signature(name: str, email: str, date: datetime) -> str:
    if date.tzinfo is None:
        date = date.astimezone()
    timestamp = int(date.timestamp())
    utc_offset = date.strftime("%z")
    return f"{name} <{email}> {timestamp} {utc_offset}"


def _parse_signature(value: str) -> tuple[str, str, datetime]:
    # Ladicle <dummy@example.com> 1700000000 +0100
    try:
        identity, timestamp, utc_offset = value.rsplit(" ", 2)
        name, _, email = identity.partition(" <")
        if not email.endswith(">"):
            raise ValueError(f"no email in {identity!r}")

        sign = -1 if utc_offset.startswith("-") else 1
        offset = timedelta(hours=int(utc_offset[1:3]), minutes=int(utc_offset[3:5]))
        date = datetime.fromtimestamp(int(timestamp), timezone(sign * offset))
    except (ValueError, OverflowError, OSError) as e:
        raise MalformedObject(f"invalid commit signature {value!r}: {e}") from None

    return name, email[:-1], date


class Commit(NamedTuple):
    tree_id: str
    # First commit has no parent commit
    parent_commit_id: str | None
    date: datetime
    author_name: str
    author_email: str
    message: str

    def to_git_object(self) -> GitObject:
        commit_info = _format_signature(self.author_name, self.author_email, self.date)

        content = bytearray()
        content.extend(f"tree {self.tree_id}\n".encode("utf-8"))
        # The parent line is written even for a root commit, with an empty value
        content.extend(f"parent {self.parent_commit_id or ''}\n".encode("utf-8"))
        content.extend(f"author {commit_info}\n".encode("utf-8"))
        content.extend(f"committer {commit_info}\n".encode("utf-8"))
        content.extend(b"\n")
        content.extend(self.message.encode("utf-8"))

        return GitObject(ObjectType.COMMIT, bytes(content))

    @staticmethod
    def from_git_object(git_object: GitObject) -> Commit:
        if git_object.object_type != ObjectType.COMMIT:
            raise MalformedObject(f"expected a commit, got a {git_object.object_type}")

        try:
            content = git_object.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedObject(f"commit is not valid utf-8: {e}") from None

        headers, separator, message = content.partition("\n\n")
        if not separator:
            raise MalformedObject("commit has no blank line before its message")

        fields = {}
        for line in headers.split("\n"):
            key, space, value = line.partition(" ")
            if not space:
                raise MalformedObject(f"invalid commit header line {line!r}")
            # Only the first parent is kept
            fields.setdefault(key, value)

        if "tree" not in fields or "author" not in fields:
            raise MalformedObject("commit is missing its tree or author")

        author_name, author_email, date = _parse_signature(fields["author"])

        return Commit(
            fields["tree"],
            fields.get("parent") or None,
            date,
            author_name,
            author_email,
            message
        )


def build_commit(
        store: ObjectStore,
        tree_id: str,
        parent_commit_id: str | None,
        message: str,
        author_name: str = DEFAULT_AUTHOR_NAME,
        author_email: str = DEFAULT_AUTHOR_EMAIL,
        date: datetime | None = None,
) -> str:
    """Write a commit of tree_id on top of parent_commit_id. Neither id is checked against the store."""
    if date is None:
        date = datetime.now().astimezone()

    commit = Commit(tree_id, parent_commit_id, date, author_name, author_email, message)
    object_id = store.store(commit.to_git_object())
    _logger.debug("Write commit %s of tree %s", object_id, tree_id)
    return object_id
