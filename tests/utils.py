import random
import string

from docwire.core.models.record import ContentKind, Document, Person
from docwire.infra.envelope import EnvelopeBackend
from docwire.infra.msgpack_backend import MsgPackArrayBackend, MsgPackMapBackend
from docwire.infra.tagged import TaggedBackend

BACKEND_CLASSES = [EnvelopeBackend, MsgPackArrayBackend, MsgPackMapBackend, TaggedBackend]


def make_people() -> tuple[Person, Person]:
    alice = Person(id=1, name="Alice", email="alice@example.com")
    bob = Person(id=2, name="Bob", email="bob@example.com")
    return alice, bob


def make_content(size: int, content: ContentKind = ContentKind.text, seed: int = 0) -> str | bytes:
    rng = random.Random(seed)
    if content is ContentKind.binary:
        return rng.randbytes(size)
    return "".join(rng.choices(string.ascii_letters + string.digits, k=size))


def make_sample_data(size: int = 0, content: ContentKind = ContentKind.text, seed: int = 0) -> Document:
    return Document(
        id=829472904,
        name="stuff.txt",
        authors=make_people(),
        content=make_content(size, content, seed),
    )
