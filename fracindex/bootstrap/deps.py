from functools import lru_cache

from pydantic import ValidationError

from fracindex.bootstrap.config.loader import get_configfile
from fracindex.bootstrap.config.settings import FracIndexConfig
from fracindex.infra.msgpack_serializer import MsgPackSerializer


@lru_cache
def get_serializer() -> MsgPackSerializer:
    return MsgPackSerializer()


@lru_cache
def get_config(cli_path: str | None = None) -> FracIndexConfig:
    configfile = get_configfile(cli_path)
    try:
        return FracIndexConfig.load(configfile)
    except FileNotFoundError as ex:
        raise SystemExit(f"Provide a correct configuration file path: {ex}")
    except ValidationError as ex:
        lines = ["Configuration validation failed:"]
        for err in ex.errors():
            location = ".".join(str(part) for part in err["loc"])
            lines.append(f"  {location}: {err['msg']}")
        raise SystemExit("\n".join(lines))
