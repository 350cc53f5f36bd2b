import json
import logging
from functools import lru_cache

from pydantic import ValidationError

from docwire.bootstrap.config.settings import BackendName, DocwireSettings
from docwire.core.helpers.utils import setup_logging
from docwire.core.ports.backend import Backend
from docwire.infra.base import BaseBackend
from docwire.infra.envelope import EnvelopeBackend
from docwire.infra.msgpack_backend import MsgPackArrayBackend, MsgPackMapBackend
from docwire.infra.tagged import TaggedBackend

BACKENDS: dict[BackendName, type[BaseBackend]] = {
    BackendName.envelope: EnvelopeBackend,
    BackendName.msgpack_array: MsgPackArrayBackend,
    BackendName.msgpack_map: MsgPackMapBackend,
    BackendName.tagged: TaggedBackend,
}

logger = logging.getLogger("bootstrap.deps")


@lru_cache
def get_settings() -> DocwireSettings:
    try:
        return DocwireSettings()
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(map(str, err['loc']))}: {err['msg']}")
        raise SystemExit("\n".join(msg))


@lru_cache
def get_backend(name: BackendName | str | None = None) -> Backend:
    """
    Build the backend called `name`, or the configured one. Backends
    hold no per-call state, so a single instance is shared.
    """
    settings = get_settings()
    backend_name = BackendName(name or settings.backend)
    backend_cls = BACKENDS[backend_name]

    logger.info(f"Using {backend_name} backend (content={settings.content_kind})")
    return backend_cls(
        content=settings.content_kind,
        strict_trailing=settings.strict_trailing,
        max_buffer_size=settings.max_buffer_size,
    )


def configure_logging() -> None:
    setup_logging(get_settings().log_level)
