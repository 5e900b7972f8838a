class GitObjectError(Exception):
    """Base class for every failure raised while encoding, storing or decoding objects."""


class ObjectNotFound(GitObjectError):
    def __init__(self, object_id: str):
        super().__init__(f"Not a valid object name {object_id}")
        self.object_id = object_id


class CorruptObject(GitObjectError):
    pass


class MalformedObject(GitObjectError):
    pass


class InvalidObjectId(GitObjectError, ValueError):
    pass
