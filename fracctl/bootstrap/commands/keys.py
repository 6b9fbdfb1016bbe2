import argparse
from typing import Any

from fracctl.bootstrap.deps import get_dispatcher
from fracctl.core.parser import parse_key
from fracindex.bootstrap.config.settings import FracIndexConfig
from fracindex.core.codec.transport import KeyEncoding
from fracindex.core.generator.generator import FractionalIndexGenerator
from fracindex.core.generator.minor import BetweenStrategy
from fracindex.core.models.index import FractionalIndex

dispatcher = get_dispatcher()


@dispatcher.command("default")
def cmd_default(config: FracIndexConfig, namespace: argparse.Namespace) -> dict[str, Any]:
    return {"key": FractionalIndex.default()}


@dispatcher.command("before")
def cmd_before(config: FracIndexConfig, namespace: argparse.Namespace) -> dict[str, Any]:
    key = parse_key(namespace.key, config.output.encoding)
    keys = []
    for _ in range(namespace.count):
        key = FractionalIndexGenerator.before(key)
        keys.append(key)
    return {"keys": keys}


@dispatcher.command("after")
def cmd_after(config: FracIndexConfig, namespace: argparse.Namespace) -> dict[str, Any]:
    key = parse_key(namespace.key, config.output.encoding)
    keys = []
    for _ in range(namespace.count):
        key = FractionalIndexGenerator.after(key)
        keys.append(key)
    return {"keys": keys}


@dispatcher.command("between")
def cmd_between(config: FracIndexConfig, namespace: argparse.Namespace) -> dict[str, Any]:
    first = parse_key(namespace.first, config.output.encoding)
    second = parse_key(namespace.second, config.output.encoding)
    strategy = BetweenStrategy(namespace.strategy or config.generator.strategy)

    key = FractionalIndexGenerator.between(first, second, strategy)
    return {"key": key, "strategy": strategy}


@dispatcher.command("inspect")
def cmd_inspect(config: FracIndexConfig, namespace: argparse.Namespace) -> dict[str, Any]:
    key = parse_key(namespace.key, config.output.encoding)
    return {
        "key": key,
        "major": key.major,
        "minor": key.minor,
        "length": len(key),
        "encodings": {encoding: key.format(encoding) for encoding in KeyEncoding},
    }


@dispatcher.command("convert")
def cmd_convert(config: FracIndexConfig, namespace: argparse.Namespace) -> dict[str, Any]:
    key = parse_key(namespace.key, config.output.encoding)
    target = KeyEncoding(namespace.to)
    return {
        "encoding": target,
        "key": key.format(target),
        "order_preserving": target.order_preserving,
    }
