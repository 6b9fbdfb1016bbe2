import argparse
from collections.abc import Callable
from typing import Any, Protocol

from fracindex.bootstrap.config.settings import FracIndexConfig


class CommandHandler(Protocol):
    def __call__(
        self,
        config: FracIndexConfig,
        namespace: argparse.Namespace,
    ) -> dict[str, Any]:
        ...


class CommandDispatcher:
    """Maps command words to the handlers registered with `command`."""

    def __init__(self) -> None:
        self._handlers: dict[tuple[str, ...], CommandHandler] = {}

    @property
    def commands(self) -> list[str]:
        return sorted(" ".join(words) for words in self._handlers)

    def dispatch(
        self,
        *words: str,
        config: FracIndexConfig,
        namespace: argparse.Namespace
    ) -> dict[str, Any]:
        handler = self._handlers.get(words)
        if handler is None:
            raise RuntimeError(f"Unknown '{' '.join(words)}' Command")
        return handler(config, namespace)

    def command(self, *words: str) -> Callable[[CommandHandler], CommandHandler]:
        def register(handler: CommandHandler) -> CommandHandler:
            if words in self._handlers:
                raise RuntimeError(f"Command already registered for '{' '.join(words)}'")
            self._handlers[words] = handler
            return handler

        return register
