from enum import IntEnum
from typing import Any, Callable, Iterable, Iterator, TypeVar

from docwire.core.codec.keyed import serialize
from docwire.core.errors import EncodeError, MalformedInputError, TrailingDataError
from docwire.core.models.record import Document, Person
from docwire.infra.base import KeyedBackend
from docwire.infra.buffer import U8, U64, ByteReader, pack_length, pack_u64

T = TypeVar("T")
F = TypeVar("F")


class Tag(IntEnum):
    """
    One-byte type tag preceding every value of the tagged format.
    """
    END     = 0x00
    U64     = 0x01
    STR     = 0x02
    BYTES   = 0x03
    SEQ     = 0x04
    STRUCT  = 0x05
    KEY     = 0x06


class TaggedSerializer:
    """
    Key-based sink of a self-describing tagged binary format:

        u64     = U64 || 8 bytes big-endian
        str     = STR || u32 length || utf-8 bytes
        bytes   = BYTES || u32 length || raw bytes
        seq     = SEQ || u32 count || value*
        struct  = STRUCT || (KEY || u8 length || name || value)* || END

    Records carry no field count: the END tag is the only
    termination signal.
    """
    def __init__(self) -> None:
        self._buffer = bytearray()

    def _tag(self, tag: Tag) -> None:
        self._buffer.append(tag)

    def serialize_u64(self, value: int) -> None:
        packed = pack_u64(value)
        self._tag(Tag.U64)
        self._buffer.extend(packed)

    def serialize_str(self, value: str) -> None:
        raw = value.encode("utf-8")
        self._tag(Tag.STR)
        self._buffer.extend(pack_length(len(raw)))
        self._buffer.extend(raw)

    def serialize_bytes(self, value: bytes) -> None:
        self._tag(Tag.BYTES)
        self._buffer.extend(pack_length(len(value)))
        self._buffer.extend(value)

    def serialize_seq(self, items: Iterable[Any], length: int) -> None:
        self._tag(Tag.SEQ)
        self._buffer.extend(pack_length(length))
        for item in items:
            serialize(item, self)

    def serialize_struct(self, name: str, length: int, fields: Iterator[tuple[str, Any]]) -> None:
        self._tag(Tag.STRUCT)
        for key, value in fields:
            raw = key.encode("utf-8")
            if len(raw) > 0xFF:
                raise EncodeError(f"{name}: field name too long: {key!r}")
            self._tag(Tag.KEY)
            self._buffer.extend(U8.pack(len(raw)))
            self._buffer.extend(raw)
            serialize(value, self)
        self._tag(Tag.END)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


class _TaggedMapAccess:
    def __init__(self, de: "TaggedDeserializer") -> None:
        self._de = de
        self._closed = False

    def next_key(self, resolve: Callable[[str], F]) -> F | None:
        if self._closed:
            return None

        tag = self._de.read_tag()
        if tag == Tag.END:
            self._closed = True
            return None
        if tag != Tag.KEY:
            raise MalformedInputError(f"expected field name, found tag 0x{tag:02x}")

        reader = self._de.reader
        return resolve(reader.read_text(reader.unpack(U8)))

    def next_value(self, read: Callable[["TaggedDeserializer"], T]) -> T:
        return read(self._de)

    def end(self) -> None:
        if self._closed:
            return
        tag = self._de.read_tag()
        if tag != Tag.END:
            raise TrailingDataError(self._de.reader.remaining + 1)
        self._closed = True


class TaggedDeserializer:
    """
    Key-based source of the tagged format. Every read checks the tag
    of the value before consuming its payload.
    """
    def __init__(self, reader: ByteReader) -> None:
        self.reader = reader

    def read_tag(self) -> int:
        return self.reader.unpack(U8)

    def _expect(self, expected: Tag) -> None:
        tag = self.read_tag()
        if tag != expected:
            raise MalformedInputError(f"expected {expected.name}, found tag 0x{tag:02x}")

    def deserialize_u64(self) -> int:
        self._expect(Tag.U64)
        return self.reader.unpack(U64)

    def deserialize_str(self) -> str:
        self._expect(Tag.STR)
        return self.reader.read_text(self.reader.read_length())

    def deserialize_bytes(self) -> bytes:
        self._expect(Tag.BYTES)
        return self.reader.take(self.reader.read_length())

    def deserialize_seq(self, element: Callable[["TaggedDeserializer"], T]) -> list[T]:
        self._expect(Tag.SEQ)
        size = self.reader.read_length()
        return [element(self) for _ in range(size)]

    def deserialize_struct(
        self,
        name: str,
        visitor: Callable[[_TaggedMapAccess], T]
    ) -> T:
        self._expect(Tag.STRUCT)
        return visitor(_TaggedMapAccess(self))


class TaggedBackend(KeyedBackend):
    """
    Self-describing tagged binary format driven by the key-based protocol.
    """
    name = "tagged"

    def encode(self, record: Person | Document) -> bytes:
        serializer = TaggedSerializer()
        self._write(record, serializer)
        data = serializer.getvalue()
        self._log_encoded(record, data)
        return data

    def decode(self, data: bytes, record_type: type = Document) -> Person | Document:
        self._check_input(data)
        reader = ByteReader(data, self._max_buffer_size)
        record = self._read(record_type, TaggedDeserializer(reader))
        self._finish(reader.remaining)
        return record
