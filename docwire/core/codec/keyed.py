"""
Key-based encoding of Person and Document.

Encoding hands the serializer a lazy, one-shot cursor of
(field name, value) pairs in declared order. Decoding is driven by the
backend's MapAccess: every raw key is resolved through the record's
closed field enumeration, values are accumulated into default slots,
and the record is only built once the map is exhausted, the input
inside it fully consumed and every declared field seen exactly once.
"""
from functools import partial
from typing import Any, Callable, Iterator

from docwire.core.errors import DuplicateFieldError, EncodeError, MissingFieldError
from docwire.core.models.fields import DocumentField, PersonField
from docwire.core.models.record import ContentKind, Document, Person
from docwire.core.ports.keyed import KeyedDeserializer, KeyedSerializer, MapAccess

FieldReader = Callable[[KeyedDeserializer], Any]


def person_fields(person: Person) -> Iterator[tuple[str, Any]]:
    for field in PersonField:
        yield field.key, getattr(person, field.key)


def document_fields(document: Document) -> Iterator[tuple[str, Any]]:
    for field in DocumentField:
        yield field.key, getattr(document, field.key)


def serialize(value: Any, s: KeyedSerializer) -> None:
    """
    Route a value to the matching serializer entry point. Records are
    turned into their field cursor; tuples and lists become sequences.
    """
    if isinstance(value, Person):
        s.serialize_struct("Person", len(PersonField), person_fields(value))
    elif isinstance(value, Document):
        s.serialize_struct("Document", len(DocumentField), document_fields(value))
    elif isinstance(value, bool):
        raise EncodeError("booleans have no wire representation")
    elif isinstance(value, int):
        s.serialize_u64(value)
    elif isinstance(value, str):
        s.serialize_str(value)
    elif isinstance(value, (bytes, bytearray)):
        s.serialize_bytes(bytes(value))
    elif isinstance(value, (tuple, list)):
        s.serialize_seq(value, len(value))
    else:
        raise EncodeError(f"unsupported value type {type(value).__name__}")


def visit_person(access: MapAccess) -> Person:
    defaults = {"id": 0, "name": "", "email": ""}
    values = _accumulate("Person", PersonField, _PERSON_READERS, defaults, access)
    return Person(**values)


def visit_document(access: MapAccess, content: ContentKind = ContentKind.text) -> Document:
    readers: dict[DocumentField, FieldReader] = {
        **_DOCUMENT_READERS,
        DocumentField.CONTENT: _content_reader(content),
    }
    defaults = {"id": 0, "name": "", "authors": (), "content": content.empty()}
    values = _accumulate("Document", DocumentField, readers, defaults, access)
    return Document(**values)


def deserialize_person(de: KeyedDeserializer) -> Person:
    return de.deserialize_struct("Person", visit_person)


def deserialize_document(de: KeyedDeserializer, content: ContentKind = ContentKind.text) -> Document:
    visitor = partial(visit_document, content=content)
    return de.deserialize_struct("Document", visitor)


def _accumulate(
    record: str,
    fields: type[PersonField] | type[DocumentField],
    readers: dict[Any, FieldReader],
    defaults: dict[str, Any],
    access: MapAccess,
) -> dict[str, Any]:
    values = dict(defaults)
    seen = set()

    while (field := access.next_key(fields.from_key)) is not None:
        if field in seen:
            raise DuplicateFieldError(record, field.key)
        values[field.key] = access.next_value(readers[field])
        seen.add(field)

    access.end()

    if missing := [field.key for field in fields if field not in seen]:
        raise MissingFieldError(record, missing)

    return values


def _read_authors(de: KeyedDeserializer) -> tuple[Person, ...]:
    return tuple(de.deserialize_seq(deserialize_person))


def _content_reader(content: ContentKind) -> FieldReader:
    if content is ContentKind.binary:
        return lambda de: de.deserialize_bytes()
    return lambda de: de.deserialize_str()


_PERSON_READERS: dict[PersonField, FieldReader] = {
    PersonField.ID:     lambda de: de.deserialize_u64(),
    PersonField.NAME:   lambda de: de.deserialize_str(),
    PersonField.EMAIL:  lambda de: de.deserialize_str(),
}

_DOCUMENT_READERS: dict[DocumentField, FieldReader] = {
    DocumentField.ID:       lambda de: de.deserialize_u64(),
    DocumentField.NAME:     lambda de: de.deserialize_str(),
    DocumentField.AUTHORS:  _read_authors,
}
