from typing import Callable, TypeVar

from docwire.core.errors import FieldCountError, MalformedInputError, MissingFieldError, TrailingDataError
from docwire.core.models.record import Document, Person
from docwire.infra.base import IndexedBackend
from docwire.infra.buffer import U8, U32, U64, ByteReader, pack_length, pack_u64

T = TypeVar("T")


class EnvelopeEncoder:
    """
    Index-based sink producing the length-prefixed envelope layout:

        record  = u8 field_count || field*
        field   = u8 index || value
        u64     = 8 bytes big-endian
        str     = u32 length || utf-8 bytes
        bytes   = u32 length || raw bytes
        seq     = u32 count || element*

    The whole body is wrapped in a frame by `frame()`.
    """
    def __init__(self) -> None:
        self._buffer = bytearray()

    def emit_u64(self, value: int) -> None:
        self._buffer.extend(pack_u64(value))

    def emit_str(self, value: str) -> None:
        self.emit_bytes(value.encode("utf-8"))

    def emit_bytes(self, value: bytes) -> None:
        self._buffer.extend(pack_length(len(value)))
        self._buffer.extend(value)

    def emit_seq(self, length: int, body: Callable[["EnvelopeEncoder"], None]) -> None:
        self._buffer.extend(pack_length(length))
        body(self)

    def emit_seq_elt(self, index: int, body: Callable[["EnvelopeEncoder"], None]) -> None:
        body(self)

    def emit_struct(self, name: str, length: int, body: Callable[["EnvelopeEncoder"], None]) -> None:
        self._buffer.extend(U8.pack(length))
        body(self)

    def emit_struct_field(self, name: str, index: int, body: Callable[["EnvelopeEncoder"], None]) -> None:
        self._buffer.extend(U8.pack(index))
        body(self)

    def frame(self) -> bytes:
        # "!I" = uint32 big-endian (network order)
        return pack_length(len(self._buffer)) + bytes(self._buffer)


class EnvelopeDecoder:
    """
    Index-based source reading the layout written by EnvelopeEncoder.
    A field count or a field index that differs from the one requested
    aborts the decode.
    """
    def __init__(self, reader: ByteReader) -> None:
        self._reader = reader
        self._records: list[str] = []

    def read_u64(self) -> int:
        return self._reader.unpack(U64)

    def read_str(self) -> str:
        return self._reader.read_text(self._reader.read_length())

    def read_bytes(self) -> bytes:
        return self._reader.take(self._reader.read_length())

    def read_seq(self, body: Callable[["EnvelopeDecoder", int], T]) -> T:
        return body(self, self._reader.read_length())

    def read_seq_elt(self, index: int, body: Callable[["EnvelopeDecoder"], T]) -> T:
        return body(self)

    def read_struct(self, name: str, length: int, body: Callable[["EnvelopeDecoder"], T]) -> T:
        found = self._reader.unpack(U8)
        if found != length:
            raise FieldCountError(name, length, found)

        self._records.append(name)
        try:
            return body(self)
        finally:
            self._records.pop()

    def read_struct_field(self, name: str, index: int, body: Callable[["EnvelopeDecoder"], T]) -> T:
        found = self._reader.unpack(U8)
        if found != index:
            raise MissingFieldError(self._records[-1], [name])
        return body(self)


class EnvelopeBackend(IndexedBackend):
    """
    Length-prefixed binary envelope driven by the index-based protocol.

    The frame header delimits the record: bytes left inside the frame
    are always an error, bytes found after the frame follow the
    trailing input policy.
    """
    name = "envelope"

    def encode(self, record: Person | Document) -> bytes:
        encoder = EnvelopeEncoder()
        self._write(record, encoder)
        data = encoder.frame()
        self._log_encoded(record, data)
        return data

    def decode(self, data: bytes, record_type: type = Document) -> Person | Document:
        self._check_input(data)

        outer = ByteReader(data, self._max_buffer_size)
        size = outer.unpack(U32)
        if size > self._max_buffer_size:
            raise MalformedInputError(f"frame of {size} bytes exceeds the {self._max_buffer_size} bytes limit")
        body = ByteReader(outer.take(size), self._max_buffer_size)

        record = self._read(record_type, EnvelopeDecoder(body))
        if body.remaining:
            raise TrailingDataError(body.remaining)

        self._finish(outer.remaining)
        return record
