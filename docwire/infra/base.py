import logging
from typing import Any

from docwire.core.codec.indexed import decode_document, decode_person, encode_document, encode_person
from docwire.core.codec.keyed import deserialize_document, deserialize_person, serialize
from docwire.core.errors import EncodeError, MalformedInputError, TrailingDataError
from docwire.core.models.record import ContentKind, Document, Person
from docwire.core.ports.indexed import IndexedDecoder, IndexedEncoder
from docwire.core.ports.keyed import KeyedDeserializer, KeyedSerializer

DEFAULT_MAX_BUFFER_SIZE = 64 * 1024 * 1024  # 64MB


class BaseBackend:
    """
    Shared plumbing of the backend adapters: record type dispatch,
    input size limit and the policy for bytes left after the record.

    When `strict_trailing` is set, leftover input is a TrailingDataError.
    Otherwise it is reported with a warning and ignored, which matches
    wire formats whose own framing already delimits the record.
    """
    name: str = "base"

    def __init__(
        self,
        content: ContentKind = ContentKind.text,
        strict_trailing: bool = True,
        max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE,
    ) -> None:
        self._content = ContentKind(content)
        self._strict_trailing = strict_trailing
        self._max_buffer_size = max_buffer_size
        self._logger = logging.getLogger(f"infra.{self.name}")

    @property
    def content(self) -> ContentKind:
        return self._content

    @property
    def strict_trailing(self) -> bool:
        return self._strict_trailing

    def _check_input(self, data: bytes) -> None:
        if len(data) > self._max_buffer_size:
            raise MalformedInputError(
                f"input of {len(data)} bytes exceeds the {self._max_buffer_size} bytes limit"
            )

    def _finish(self, remaining: int) -> None:
        if remaining <= 0:
            return
        if self._strict_trailing:
            raise TrailingDataError(remaining)
        self._logger.warning(f"Ignoring {remaining} trailing byte(s) after the record")

    @staticmethod
    def _check_record(record: Any) -> None:
        if not isinstance(record, (Person, Document)):
            raise EncodeError(f"cannot encode {type(record).__name__}, expected Person or Document")

    def _log_encoded(self, record: Person | Document, data: bytes) -> None:
        self._logger.debug(f"Encoded {type(record).__name__} into {len(data)} bytes")


class IndexedBackend(BaseBackend):
    """
    Backend driven through the index-based protocol.
    """

    def _write(self, record: Person | Document, e: IndexedEncoder) -> None:
        self._check_record(record)
        if isinstance(record, Person):
            encode_person(record, e)
        else:
            encode_document(record, e)

    def _read(self, record_type: type, d: IndexedDecoder) -> Person | Document:
        if record_type is Person:
            return decode_person(d)
        if record_type is Document:
            return decode_document(d, self._content)
        raise TypeError(f"cannot decode {record_type!r}, expected Person or Document")


class KeyedBackend(BaseBackend):
    """
    Backend driven through the key-based protocol.
    """

    def _write(self, record: Person | Document, s: KeyedSerializer) -> None:
        self._check_record(record)
        serialize(record, s)

    def _read(self, record_type: type, de: KeyedDeserializer) -> Person | Document:
        if record_type is Person:
            return deserialize_person(de)
        if record_type is Document:
            return deserialize_document(de, self._content)
        raise TypeError(f"cannot decode {record_type!r}, expected Person or Document")
