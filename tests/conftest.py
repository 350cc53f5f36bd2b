import pytest
from typing import Generator

from docwire.bootstrap import deps
from docwire.bootstrap.config.loader import get_configfile
from docwire.core.models.record import ContentKind, Document, Person
from tests.utils import BACKEND_CLASSES, make_people, make_sample_data


@pytest.fixture
def alice() -> Person:
    return make_people()[0]


@pytest.fixture
def bob() -> Person:
    return make_people()[1]


@pytest.fixture
def document() -> Document:
    return make_sample_data()


@pytest.fixture(params=BACKEND_CLASSES, ids=lambda cls: cls.name)
def backend(request):
    return request.param()


@pytest.fixture(params=BACKEND_CLASSES, ids=lambda cls: cls.name)
def binary_backend(request):
    return request.param(content=ContentKind.binary)


@pytest.fixture(params=BACKEND_CLASSES, ids=lambda cls: cls.name)
def lenient_backend(request):
    return request.param(strict_trailing=False)


@pytest.fixture
def clean_config(monkeypatch) -> Generator[None, None, None]:
    """
    Reset the cached configuration around a test so that environment
    variables set through monkeypatch are picked up.
    """
    for var in ("DOCWIRE_CONFIG", "DOCWIRE_BACKEND", "DOCWIRE_CONTENT_KIND",
                "DOCWIRE_STRICT_TRAILING", "DOCWIRE_MAX_BUFFER_SIZE", "DOCWIRE_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)

    def clear():
        get_configfile.cache_clear()
        deps.get_settings.cache_clear()
        deps.get_backend.cache_clear()

    clear()
    try:
        yield
    finally:
        clear()
