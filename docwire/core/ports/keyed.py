from typing import Any, Callable, Iterable, Iterator, Protocol, TypeVar

T = TypeVar("T")
F = TypeVar("F")


class KeyedSerializer(Protocol):
    """
    Sink of the key-based protocol.

    Records are handed over as a lazy cursor of (field name, value)
    pairs. The serializer pulls from it until it is exhausted, which
    happens exactly once, and writes each value through
    `docwire.core.codec.keyed.serialize` so nested records take the
    same path.
    """

    def serialize_u64(self, value: int) -> None:
        ...

    def serialize_str(self, value: str) -> None:
        ...

    def serialize_bytes(self, value: bytes) -> None:
        ...

    def serialize_seq(self, items: Iterable[Any], length: int) -> None:
        """Write `length` items, each one through the generic dispatcher."""

    def serialize_struct(self, name: str, length: int, fields: Iterator[tuple[str, Any]]) -> None:
        """
        Write a record announced as having `length` fields by draining
        the `fields` cursor.
        """


class MapAccess(Protocol):
    """
    Incremental view over the entries of one encoded record.
    """

    def next_key(self, resolve: Callable[[str], F]) -> F | None:
        """
        Read the next raw key and map it through `resolve`, or return
        None once the record has no more entries. `resolve` raises on
        names outside the declared set.
        """

    def next_value(self, read: Callable[["KeyedDeserializer"], T]) -> T:
        """Read the value paired with the key returned last."""

    def end(self) -> None:
        """
        Fail if input remains inside the record. Visitors that stop
        before next_key returns None are the ones this check catches.
        """


class KeyedDeserializer(Protocol):
    """
    Source of the key-based protocol.
    """

    def deserialize_u64(self) -> int:
        ...

    def deserialize_str(self) -> str:
        ...

    def deserialize_bytes(self) -> bytes:
        ...

    def deserialize_seq(self, element: Callable[["KeyedDeserializer"], T]) -> list[T]:
        ...

    def deserialize_struct(
        self,
        name: str,
        visitor: Callable[[MapAccess], T]
    ) -> T:
        """
        Open an encoded record and hand its entries to `visitor`.
        `name` mirrors the one given to serialize_struct.
        """
