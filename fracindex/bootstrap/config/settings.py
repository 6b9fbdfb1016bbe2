from contextvars import ContextVar
from pathlib import Path
from typing import Annotated, Literal, Self

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from fracindex.core.codec.transport import KeyEncoding
from fracindex.core.generator.minor import BetweenStrategy


_configfile: ContextVar[Path | None] = ContextVar("fracindex_configfile", default=None)


class GeneratorSettings(BaseModel):
    strategy: Annotated[
        BetweenStrategy,
        Field(
            description=(
                "Strategy used to place a key between two others.\n"
                "'spread' biases new bytes toward the middle of the gap and keeps\n"
                "keys short under repeated inserts at the same spot.\n"
                "'minimal' always takes the smallest sufficient step."
            ),
            default=BetweenStrategy.spread
        )
    ]


class OutputSettings(BaseModel):
    encoding: Annotated[
        KeyEncoding,
        Field(
            description=(
                "Text encoding used to read and print keys.\n"
                "'hex' and 'sortable' preserve key order as plain strings;\n"
                "'base64' and 'base64url' are compact but must never be sorted on."
            ),
            default=KeyEncoding.hex
        )
    ]

    format: Annotated[
        Literal["yaml", "json"],
        Field(
            description="Renderer used for command output.",
            default="yaml"
        )
    ]


class LoggingSettings(BaseModel):
    level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        Field(
            description="Logging verbosity.",
            default="WARNING"
        )
    ]


class FracIndexConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FRACINDEX_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    generator: Annotated[
        GeneratorSettings,
        Field(
            description="Key generation settings.",
            default_factory=GeneratorSettings
        )
    ]

    output: Annotated[
        OutputSettings,
        Field(
            description="How keys and command results are written.",
            default_factory=OutputSettings
        )
    ]

    logging: Annotated[
        LoggingSettings,
        Field(
            description="Logging configuration.",
            default_factory=LoggingSettings
        )
    ]

    @classmethod
    def load(cls, configfile: Path | None = None) -> Self:
        """Build the configuration, reading `configfile` when given (env vars still win)."""
        token = _configfile.set(configfile)
        try:
            return cls()
        finally:
            _configfile.reset(token)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        configfile = _configfile.get()
        if configfile is None:
            return init_settings, env_settings
        return init_settings, env_settings, YamlConfigSettingsSource(settings_cls, yaml_file=configfile)
