from enum import StrEnum
from typing import Annotated, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict, YamlConfigSettingsSource

from docwire.bootstrap.config.loader import get_configfile
from docwire.core.models.record import ContentKind


class BackendName(StrEnum):
    envelope = "envelope"
    msgpack_array = "msgpack_array"
    msgpack_map = "msgpack_map"
    tagged = "tagged"


class DocwireSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DOCWIRE_",
        extra="ignore"
    )

    backend: Annotated[
        BackendName,
        Field(
            description=(
                "Wire format used by get_backend() when no name is given.\n"
                "envelope and msgpack_array are driven by the index-based protocol,\n"
                "msgpack_map and tagged by the key-based protocol."
            ),
            default=BackendName.msgpack_map
        )
    ]

    content_kind: Annotated[
        ContentKind,
        Field(
            description=(
                "Representation of Document.content expected on decode.\n"
                "'text' reads a string, 'binary' reads opaque bytes. The choice is\n"
                "global: both sides of a round trip must agree on it."
            ),
            default=ContentKind.text
        )
    ]

    strict_trailing: Annotated[
        bool,
        Field(
            description=(
                "Whether input left after the top-level record fails the decode.\n"
                "When disabled, the leftover bytes are logged and ignored."
            ),
            default=True
        )
    ]

    max_buffer_size: Annotated[
        int,
        Field(
            description="Maximum size of an input buffer and of any length declared inside it.",
            default=64 * 1024 * 1024,
            gt=0
        )
    ]

    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        Field(
            description="Logging verbosity applied by configure_logging().",
            default="INFO"
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Priority: init > ENV > YAML file
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings]
        if (file := get_configfile()) is not None:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=file))
        return tuple(sources)
