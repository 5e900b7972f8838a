import logging
import os
import string
import tempfile
from pathlib import Path

from mygit.entities.git_object import GitObject, ObjectType, identify, parse_frame
from mygit.errors import CorruptObject, InvalidObjectId, ObjectNotFound
from mygit.utils import compress_stream, decompress

_logger = logging.getLogger(__name__)

OBJECT_FILE_MODE = 0o444


def get_object_path(dot_git: Path, object_id: str) -> Path:
    if len(object_id) != 40 or any(c not in string.hexdigits for c in object_id):
        raise InvalidObjectId(f"{object_id!r} is not a 40 character hex object id")

    object_id = object_id.lower()
    return dot_git / "objects" / object_id[:2] / object_id[2:]


class ObjectStore:
    """
    Loose object database rooted at a metadata directory (usually `.git`).

    Objects live in `objects/<first 2 hex>/<remaining 38 hex>`, zlib
    compressed. The `objects` directory itself is created by `init`, never
    here.
    """

    def __init__(self, dot_git: Path):
        self.dot_git = Path(dot_git)

    @property
    def objects_dir(self) -> Path:
        return self.dot_git / "objects"

    def object_path(self, object_id: str) -> Path:
        return get_object_path(self.dot_git, object_id)

    def exists(self, object_id: str) -> bool:
        return self.object_path(object_id).is_file()

    def put(self, framed: bytes) -> str:
        object_id = identify(framed)
        path = self.object_path(object_id)
        if path.exists():
            _logger.debug("Object %s already stored", object_id)
            return object_id

        # Create the directory with the first 2 characters of the object_id
        path.parent.mkdir(exist_ok=True)

        # Write to a private file and rename it into place, so readers never see a partial object
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix="tmp_obj_")
        try:
            with os.fdopen(fd, "wb") as f:
                for chunk in compress_stream(framed):
                    f.write(chunk)
            os.chmod(tmp_path, OBJECT_FILE_MODE)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        _logger.debug("Wrote object %s (%d bytes)", object_id, len(framed))
        return object_id

    def get(self, object_id: str) -> bytes:
        path = self.object_path(object_id)
        try:
            compressed = path.read_bytes()
        except FileNotFoundError:
            raise ObjectNotFound(object_id) from None

        data, unused_data = decompress(compressed)
        if unused_data:
            raise CorruptObject(f"object {object_id} has {len(unused_data)} trailing bytes")

        _logger.debug("Read object %s", object_id)
        return data

    def store(self, git_object: GitObject) -> str:
        return self.put(git_object.object_header)

    def retrieve(self, object_id: str) -> GitObject:
        return GitObject.from_frame(self.get(object_id))

    def get_object(self, object_id: str) -> tuple[ObjectType, bytes]:
        object_type, _, payload = parse_frame(self.get(object_id))
        return object_type, payload

    def read_header(self, object_id: str) -> tuple[ObjectType, int]:
        object_type, length, _ = parse_frame(self.get(object_id))
        return object_type, length

    def read_payload(self, object_id: str) -> bytes:
        return parse_frame(self.get(object_id)).payload

    def put_blob(self, path: Path) -> str:
        with open(path, "rb") as f:
            content = f.read()

        _logger.debug("Write blob: %s", path)
        return self.store(GitObject(ObjectType.BLOB, content))
