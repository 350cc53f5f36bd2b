"""
Index-based encoding of Person and Document.

Each record is written as a struct whose field count is declared up
front, followed by every field in declared order, tagged with its
ordinal index and name. Decoding requests the same indexes in the same
order; it never skips, reorders or defaults a field.
"""
from functools import partial
from typing import Callable

from docwire.core.models.fields import DocumentField, PersonField
from docwire.core.models.record import ContentKind, Document, Person
from docwire.core.ports.indexed import IndexedDecoder, IndexedEncoder


def encode_person(person: Person, e: IndexedEncoder) -> None:
    writers: dict[PersonField, Callable[[IndexedEncoder], None]] = {
        PersonField.ID:     lambda e: e.emit_u64(person.id),
        PersonField.NAME:   lambda e: e.emit_str(person.name),
        PersonField.EMAIL:  lambda e: e.emit_str(person.email),
    }

    def body(e: IndexedEncoder) -> None:
        for field in PersonField:
            e.emit_struct_field(field.key, field.value, writers[field])

    e.emit_struct("Person", len(PersonField), body)


def encode_document(document: Document, e: IndexedEncoder) -> None:
    writers: dict[DocumentField, Callable[[IndexedEncoder], None]] = {
        DocumentField.ID:       lambda e: e.emit_u64(document.id),
        DocumentField.NAME:     lambda e: e.emit_str(document.name),
        DocumentField.AUTHORS:  partial(_emit_authors, document.authors),
        DocumentField.CONTENT:  partial(_emit_content, document.content),
    }

    def body(e: IndexedEncoder) -> None:
        for field in DocumentField:
            e.emit_struct_field(field.key, field.value, writers[field])

    e.emit_struct("Document", len(DocumentField), body)


def decode_person(d: IndexedDecoder) -> Person:
    readers: dict[PersonField, Callable[[IndexedDecoder], object]] = {
        PersonField.ID:     lambda d: d.read_u64(),
        PersonField.NAME:   lambda d: d.read_str(),
        PersonField.EMAIL:  lambda d: d.read_str(),
    }

    def body(d: IndexedDecoder) -> Person:
        values = {
            field.key: d.read_struct_field(field.key, field.value, readers[field])
            for field in PersonField
        }
        return Person(**values)

    return d.read_struct("Person", len(PersonField), body)


def decode_document(d: IndexedDecoder, content: ContentKind = ContentKind.text) -> Document:
    readers: dict[DocumentField, Callable[[IndexedDecoder], object]] = {
        DocumentField.ID:       lambda d: d.read_u64(),
        DocumentField.NAME:     lambda d: d.read_str(),
        DocumentField.AUTHORS:  _read_authors,
        DocumentField.CONTENT:  _content_reader(content),
    }

    def body(d: IndexedDecoder) -> Document:
        values = {
            field.key: d.read_struct_field(field.key, field.value, readers[field])
            for field in DocumentField
        }
        return Document(**values)

    return d.read_struct("Document", len(DocumentField), body)


def _emit_authors(authors: tuple[Person, ...], e: IndexedEncoder) -> None:
    def body(e: IndexedEncoder) -> None:
        for index, person in enumerate(authors):
            e.emit_seq_elt(index, partial(encode_person, person))

    e.emit_seq(len(authors), body)


def _emit_content(content: str | bytes, e: IndexedEncoder) -> None:
    if isinstance(content, bytes):
        e.emit_bytes(content)
    else:
        e.emit_str(content)


def _read_authors(d: IndexedDecoder) -> tuple[Person, ...]:
    def body(d: IndexedDecoder, length: int) -> tuple[Person, ...]:
        return tuple(d.read_seq_elt(index, decode_person) for index in range(length))

    return d.read_seq(body)


def _content_reader(content: ContentKind) -> Callable[[IndexedDecoder], str | bytes]:
    if content is ContentKind.binary:
        return lambda d: d.read_bytes()
    return lambda d: d.read_str()
