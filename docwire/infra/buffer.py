import struct

from docwire.core.errors import EncodeError, MalformedInputError, TruncatedInputError

U8 = struct.Struct("!B")
U32 = struct.Struct("!I")
U64 = struct.Struct("!Q")


def pack_u64(value: int) -> bytes:
    try:
        return U64.pack(value)
    except struct.error as ex:
        raise EncodeError(f"value does not fit in u64: {value}") from ex


def pack_length(length: int) -> bytes:
    try:
        return U32.pack(length)
    except struct.error as ex:
        raise EncodeError(f"length does not fit in u32: {length}") from ex


class ByteReader:
    """
    Forward-only cursor over an immutable buffer.

    Every read checks the remaining size first and raises
    TruncatedInputError instead of returning short data. Declared
    lengths are bounded by `max_length` so a corrupted header cannot
    make the reader trust an absurd size.
    """
    def __init__(self, data: bytes, max_length: int) -> None:
        self._view = memoryview(data)
        self._pos = 0
        self._max_length = max_length

    @property
    def remaining(self) -> int:
        return len(self._view) - self._pos

    def take(self, size: int) -> bytes:
        if size > self.remaining:
            raise TruncatedInputError(size, self.remaining)
        chunk = self._view[self._pos: self._pos + size].tobytes()
        self._pos += size
        return chunk

    def unpack(self, fmt: struct.Struct) -> int:
        if fmt.size > self.remaining:
            raise TruncatedInputError(fmt.size, self.remaining)
        value = fmt.unpack_from(self._view, self._pos)[0]
        self._pos += fmt.size
        return value

    def read_length(self, fmt: struct.Struct = U32) -> int:
        length = self.unpack(fmt)
        if length > self._max_length:
            raise MalformedInputError(
                f"declared length {length} exceeds the {self._max_length} bytes limit"
            )
        return length

    def read_text(self, size: int) -> str:
        raw = self.take(size)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as ex:
            raise MalformedInputError(f"invalid utf-8 text: {ex.reason}") from ex
