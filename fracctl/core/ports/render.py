from typing import Any, Protocol

from fracindex.core.codec.transport import KeyEncoding


class Renderer(Protocol):
    """Turns a command result into text, keys written in `encoding`."""
    encoding: KeyEncoding

    def render(self, data: dict[str, Any]) -> str:
        ...
