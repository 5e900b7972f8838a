import enum
import hashlib
from typing import NamedTuple

from mygit.errors import MalformedObject
from mygit.utils import ByteReader


class ObjectType(str, enum.Enum):
    TREE = "tree"
    BLOB = "blob"
    COMMIT = "commit"

    def __str__(self):
        return self.value


class ParsedFrame(NamedTuple):
    object_type: ObjectType
    length: int
    payload: bytes


def frame(object_type: ObjectType, content: bytes) -> bytes:
    # Git objects are stored in the following format:
    # objectType contentSize\0content
    return f'{object_type} {len(content)}\x00'.encode() + content


def identify(framed: bytes) -> str:
    return hashlib.sha1(framed).hexdigest()


def parse_frame(raw: bytes, strict: bool = True) -> ParsedFrame:
    """
    Split a raw frame into its type, declared length and payload.

    With strict=False the declared length is returned as found, even when it
    doesn't match the payload.
    """
    reader = ByteReader(raw)
    try:
        header = reader.read_until(b"\0")
    except MalformedObject:
        raise MalformedObject("object header is not terminated by a null byte") from None

    # blob 12\x00* text=auto\n
    type_token, space, length_token = header.partition(b" ")
    if not space:
        raise MalformedObject(f"object header {header!r} has no length")

    try:
        object_type = ObjectType(type_token.decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        raise MalformedObject(f"unknown object type {type_token!r}") from None

    if not length_token.isdigit():
        raise MalformedObject(f"invalid object length {length_token!r}")
    length = int(length_token)

    payload = reader.read_rest()
    if strict and length != len(payload):
        raise MalformedObject(f"object declares {length} bytes but has {len(payload)}")

    return ParsedFrame(object_type, length, payload)


class GitObject:
    def __init__(self, object_type: ObjectType, content: bytes):
        self.object_header = frame(object_type, content)
        self.object_id = identify(self.object_header)
        self.object_type = object_type
        self.content = bytes(content)

    @staticmethod
    def from_frame(raw: bytes) -> "GitObject":
        object_type, _, content = parse_frame(raw)
        return GitObject(object_type, content)

    def __repr__(self):
        return f"GitObject({self.object_type}, {self.object_id})"
