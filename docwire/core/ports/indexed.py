from typing import Callable, Protocol, TypeVar

T = TypeVar("T")


class IndexedEncoder(Protocol):
    """
    Sink of the index-based protocol.

    A record is written by declaring its total field count once, through
    `emit_struct`, then contributing every field in declared order with
    its ordinal index and name. The encoder owns the byte layout; the
    protocol only guarantees traversal order and the (name, index) pairing.
    """

    def emit_u64(self, value: int) -> None:
        """Write an unsigned 64-bit integer."""

    def emit_str(self, value: str) -> None:
        """Write a text value."""

    def emit_bytes(self, value: bytes) -> None:
        """Write an opaque byte sequence."""

    def emit_seq(self, length: int, body: Callable[["IndexedEncoder"], None]) -> None:
        """
        Declare a sequence of `length` elements, then run `body` which
        is expected to call `emit_seq_elt` exactly `length` times.
        """

    def emit_seq_elt(self, index: int, body: Callable[["IndexedEncoder"], None]) -> None:
        """Write the element at position `index` of the current sequence."""

    def emit_struct(self, name: str, length: int, body: Callable[["IndexedEncoder"], None]) -> None:
        """
        Declare a record of `length` fields, then run `body` which emits
        each field through `emit_struct_field`.
        """

    def emit_struct_field(self, name: str, index: int, body: Callable[["IndexedEncoder"], None]) -> None:
        """Write the field at ordinal `index`, known as `name`."""


class IndexedDecoder(Protocol):
    """
    Source of the index-based protocol.

    Mirrors IndexedEncoder: the reader requests every ordinal index in
    the same fixed order it was written. There is no optional field;
    implementations must reject a declared field count that does not
    match and, where the wire format tags fields, an unexpected index.
    Wire level errors are raised as-is.
    """

    def read_u64(self) -> int:
        ...

    def read_str(self) -> str:
        ...

    def read_bytes(self) -> bytes:
        ...

    def read_seq(self, body: Callable[["IndexedDecoder", int], T]) -> T:
        """Read a sequence header and run `body` with the element count."""

    def read_seq_elt(self, index: int, body: Callable[["IndexedDecoder"], T]) -> T:
        ...

    def read_struct(self, name: str, length: int, body: Callable[["IndexedDecoder"], T]) -> T:
        """Read a record header of `length` fields and run `body`."""

    def read_struct_field(self, name: str, index: int, body: Callable[["IndexedDecoder"], T]) -> T:
        ...
