import json

import yaml

from fracctl.core.ports.render import Renderer
from fracindex.core.codec.transport import KeyEncoding
from fracindex.core.models.index import FractionalIndex


class KeyNormalizer:
    """Turns command results into plain data, writing keys in one encoding."""

    def __init__(self, encoding: KeyEncoding) -> None:
        self.encoding = encoding

    def _normalize(self, obj):
        if isinstance(obj, FractionalIndex):
            return obj.format(self.encoding)

        if isinstance(obj, bytes):
            return obj.hex()

        # StrEnum members are rendered by value
        if isinstance(obj, str):
            return str(obj)

        if isinstance(obj, dict):
            return {self._normalize(k): self._normalize(v) for k, v in obj.items()}

        if isinstance(obj, (list, tuple)):
            return [self._normalize(x) for x in obj]

        return obj


class JsonRenderer(KeyNormalizer, Renderer):
    def render(self, data: dict) -> str:
        return json.dumps(self._normalize(data), indent=2, sort_keys=False)


class YamlRenderer(KeyNormalizer, Renderer):
    def render(self, data: dict) -> str:
        return yaml.safe_dump(self._normalize(data), sort_keys=False).rstrip("\n")


RENDERERS: dict[str, type[KeyNormalizer]] = {
    "json": JsonRenderer,
    "yaml": YamlRenderer,
}
