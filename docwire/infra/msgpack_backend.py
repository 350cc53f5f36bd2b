import msgpack
from typing import Any, Callable, Iterable, Iterator, TypeVar

from docwire.core.codec.keyed import serialize
from docwire.core.errors import EncodeError, FieldCountError, MalformedInputError, TrailingDataError
from docwire.core.models.record import U64_MAX, Document, Person
from docwire.infra.base import IndexedBackend, KeyedBackend

T = TypeVar("T")
F = TypeVar("F")


class _MsgPackWriter:
    def __init__(self) -> None:
        self._packer = msgpack.Packer(use_bin_type=True)
        self._buffer = bytearray()

    def _write_u64(self, value: int) -> None:
        if not 0 <= value <= U64_MAX:
            raise EncodeError(f"value does not fit in u64: {value}")
        self._buffer.extend(self._packer.pack(value))

    def _write(self, value: str | bytes) -> None:
        self._buffer.extend(self._packer.pack(value))

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


class _MsgPackReader:
    def __init__(self, unpacker: msgpack.Unpacker) -> None:
        self.unpacker = unpacker

    def _read_u64(self) -> int:
        value = self.unpacker.unpack()
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U64_MAX:
            raise MalformedInputError(f"expected u64, found {type(value).__name__}")
        return value

    def _read_str(self) -> str:
        value = self.unpacker.unpack()
        if not isinstance(value, str):
            raise MalformedInputError(f"expected str, found {type(value).__name__}")
        return value

    def _read_bytes(self) -> bytes:
        value = self.unpacker.unpack()
        if not isinstance(value, bytes):
            raise MalformedInputError(f"expected bytes, found {type(value).__name__}")
        return value


class MsgPackArrayEncoder(_MsgPackWriter):
    """
    Index-based sink writing each record as a fixed-length msgpack array,
    one slot per field, in declared order.
    """

    def emit_u64(self, value: int) -> None:
        self._write_u64(value)

    def emit_str(self, value: str) -> None:
        self._write(value)

    def emit_bytes(self, value: bytes) -> None:
        self._write(value)

    def emit_seq(self, length: int, body: Callable[["MsgPackArrayEncoder"], None]) -> None:
        self._buffer.extend(self._packer.pack_array_header(length))
        body(self)

    def emit_seq_elt(self, index: int, body: Callable[["MsgPackArrayEncoder"], None]) -> None:
        body(self)

    def emit_struct(self, name: str, length: int, body: Callable[["MsgPackArrayEncoder"], None]) -> None:
        self._buffer.extend(self._packer.pack_array_header(length))
        body(self)

    def emit_struct_field(self, name: str, index: int, body: Callable[["MsgPackArrayEncoder"], None]) -> None:
        body(self)


class MsgPackArrayDecoder(_MsgPackReader):
    """
    Index-based source reading arrays written by MsgPackArrayEncoder.
    The array length is the declared field count and must match.
    """

    def read_u64(self) -> int:
        return self._read_u64()

    def read_str(self) -> str:
        return self._read_str()

    def read_bytes(self) -> bytes:
        return self._read_bytes()

    def read_seq(self, body: Callable[["MsgPackArrayDecoder", int], T]) -> T:
        return body(self, self.unpacker.read_array_header())

    def read_seq_elt(self, index: int, body: Callable[["MsgPackArrayDecoder"], T]) -> T:
        return body(self)

    def read_struct(self, name: str, length: int, body: Callable[["MsgPackArrayDecoder"], T]) -> T:
        found = self.unpacker.read_array_header()
        if found != length:
            raise FieldCountError(name, length, found)
        return body(self)

    def read_struct_field(self, name: str, index: int, body: Callable[["MsgPackArrayDecoder"], T]) -> T:
        return body(self)


class MsgPackMapSerializer(_MsgPackWriter):
    """
    Key-based sink writing each record as a msgpack map from field
    name to value. The map header announces the field count, so the
    cursor must yield exactly that many pairs.
    """

    def serialize_u64(self, value: int) -> None:
        self._write_u64(value)

    def serialize_str(self, value: str) -> None:
        self._write(value)

    def serialize_bytes(self, value: bytes) -> None:
        self._write(value)

    def serialize_seq(self, items: Iterable[Any], length: int) -> None:
        self._buffer.extend(self._packer.pack_array_header(length))
        for item in items:
            serialize(item, self)

    def serialize_struct(self, name: str, length: int, fields: Iterator[tuple[str, Any]]) -> None:
        self._buffer.extend(self._packer.pack_map_header(length))
        written = 0
        for key, value in fields:
            self._write(key)
            serialize(value, self)
            written += 1

        if written != length:
            raise EncodeError(f"{name}: announced {length} fields, wrote {written}")


class _MsgPackMapAccess:
    def __init__(self, de: "MsgPackMapDeserializer", size: int) -> None:
        self._de = de
        self._remaining = size

    def next_key(self, resolve: Callable[[Any], F]) -> F | None:
        if self._remaining == 0:
            return None
        self._remaining -= 1
        return resolve(self._de.unpacker.unpack())

    def next_value(self, read: Callable[["MsgPackMapDeserializer"], T]) -> T:
        return read(self._de)

    def end(self) -> None:
        if self._remaining:
            raise TrailingDataError(self._remaining, unit="entry")


class MsgPackMapDeserializer(_MsgPackReader):
    """
    Key-based source reading maps written by MsgPackMapSerializer,
    whatever the order of their keys.
    """

    def deserialize_u64(self) -> int:
        return self._read_u64()

    def deserialize_str(self) -> str:
        return self._read_str()

    def deserialize_bytes(self) -> bytes:
        return self._read_bytes()

    def deserialize_seq(self, element: Callable[["MsgPackMapDeserializer"], T]) -> list[T]:
        size = self.unpacker.read_array_header()
        return [element(self) for _ in range(size)]

    def deserialize_struct(
        self,
        name: str,
        visitor: Callable[[_MsgPackMapAccess], T]
    ) -> T:
        return visitor(_MsgPackMapAccess(self, self.unpacker.read_map_header()))


class _MsgPackBackendMixin:
    _max_buffer_size: int

    def _unpacker(self, data: bytes) -> msgpack.Unpacker:
        unpacker = msgpack.Unpacker(raw=False, max_buffer_size=self._max_buffer_size)
        unpacker.feed(data)
        return unpacker


class MsgPackArrayBackend(_MsgPackBackendMixin, IndexedBackend):
    """
    MessagePack arrays driven by the index-based protocol.
    Errors raised by msgpack itself (truncated or malformed input)
    reach the caller unchanged.
    """
    name = "msgpack_array"

    def encode(self, record: Person | Document) -> bytes:
        encoder = MsgPackArrayEncoder()
        self._write(record, encoder)
        data = encoder.getvalue()
        self._log_encoded(record, data)
        return data

    def decode(self, data: bytes, record_type: type = Document) -> Person | Document:
        self._check_input(data)
        unpacker = self._unpacker(data)
        record = self._read(record_type, MsgPackArrayDecoder(unpacker))
        self._finish(len(data) - unpacker.tell())
        return record


class MsgPackMapBackend(_MsgPackBackendMixin, KeyedBackend):
    """
    MessagePack maps driven by the key-based protocol.
    """
    name = "msgpack_map"

    def encode(self, record: Person | Document) -> bytes:
        serializer = MsgPackMapSerializer()
        self._write(record, serializer)
        data = serializer.getvalue()
        self._log_encoded(record, data)
        return data

    def decode(self, data: bytes, record_type: type = Document) -> Person | Document:
        self._check_input(data)
        unpacker = self._unpacker(data)
        record = self._read(record_type, MsgPackMapDeserializer(unpacker))
        self._finish(len(data) - unpacker.tell())
        return record
