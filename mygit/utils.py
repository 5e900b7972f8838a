import zlib

from mygit.errors import CorruptObject, MalformedObject


def compress_stream(content: bytes, chunk_size: int = 64 * 1024):
    compressor = zlib.compressobj()
    for start in range(0, len(content), chunk_size):
        yield compressor.compress(content[start:start + chunk_size])
    yield compressor.flush()


def decompress(content):
    d = zlib.decompressobj()
    try:
        data = d.decompress(content)
    except zlib.error as e:
        raise CorruptObject(f"unable to decompress object: {e}") from e

    if not d.eof:
        raise CorruptObject("compressed stream ended early")

    # unused_data are the remaining bytes that we didn't consume during the decompression
    return data, d.unused_data


class ByteReader:
    """
    Cursor over a byte buffer.

    Every read is bounds-checked: running out of input before a delimiter or
    before the requested number of bytes raises MalformedObject instead of
    returning a short slice.
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self.position = 0

    def at_end(self) -> bool:
        return self.position >= len(self._data)

    def remaining(self) -> int:
        return len(self._data) - self.position

    def read_until(self, delimiter: bytes) -> bytes:
        """Read up to the delimiter, consume it, and return what came before it."""
        end = self._data.find(delimiter, self.position)
        if end == -1:
            raise MalformedObject(f"expected {delimiter!r} after offset {self.position}")

        chunk = self._data[self.position:end]
        self.position = end + len(delimiter)
        return chunk

    def read_exact(self, size: int) -> bytes:
        if size > self.remaining():
            raise MalformedObject(f"expected {size} bytes at offset {self.position}, found {self.remaining()}")

        chunk = self._data[self.position:self.position + size]
        self.position += size
        return chunk

    def read_rest(self) -> bytes:
        chunk = self._data[self.position:]
        self.position = len(self._data)
        return chunk
