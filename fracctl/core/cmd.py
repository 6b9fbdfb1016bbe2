import argparse
import cmd
import shlex
import sys
from collections.abc import Iterable
from typing import Any

from fracctl.core.dispatcher import CommandDispatcher
from fracctl.core.parser import ParseError, positive_count
from fracctl.core.ports.render import Renderer
from fracindex.bootstrap.config.settings import FracIndexConfig
from fracindex.core.codec.transport import KeyEncoding
from fracindex.core.errors import FractionalIndexError
from fracindex.core.generator.minor import BetweenStrategy


class FracCmd(cmd.Cmd):
    intro = "Entering fracctl interactive mode. Type 'exit' or 'quit' to leave."
    prompt = "fracctl> "

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        config: FracIndexConfig,
        renderer: Renderer,
        args: argparse.Namespace,
    ) -> None:
        super().__init__()

        self._dispatcher = dispatcher
        self._config = config
        self._renderer = renderer
        self._args = args
        self._argparser, self._parsers = build_argparser()
        self.exit_code = 0

    @property
    def args(self) -> argparse.Namespace:
        return self._args

    @property
    def config(self) -> FracIndexConfig:
        return self._config

    @property
    def interactive(self) -> bool:
        return self._args.command is None

    def handle(self, name: str, namespace: argparse.Namespace) -> None:
        try:
            data = self._dispatcher.dispatch(
                name,
                config=self._config,
                namespace=namespace
            )
        except (FractionalIndexError, ParseError) as ex:
            print(f"error: {ex}", file=sys.stderr)
            self.exit_code = 1
            return

        print(self._renderer.render(data))

    def do_default(self, line):
        """default: print the starting key"""
        self._run("default", line)

    def do_before(self, line):
        """before KEY [-n N]: mint N keys, each one before the previous"""
        self._run("before", line)

    def do_after(self, line):
        """after KEY [-n N]: mint N keys, each one after the previous"""
        self._run("after", line)

    def do_between(self, line):
        """between A B [--strategy minimal|spread]: mint a key between A and B"""
        self._run("between", line)

    def do_inspect(self, line):
        """inspect KEY: show major, minor and every encoding of a key"""
        self._run("inspect", line)

    def do_convert(self, line):
        """convert KEY --to ENCODING: re-encode a key"""
        self._run("convert", line)

    def do_exit(self, arg):
        return True

    def do_quit(self, arg):
        return True

    def do_EOF(self, arg):
        print()
        return True

    def _run(self, name: str, line: str) -> None:
        namespace = self._namespace(name, line)
        if namespace is not None:
            self.handle(name, namespace)

    def _namespace(self, name: str, line: str) -> argparse.Namespace | None:
        # one-shot mode: the command line was parsed at startup
        if not self.interactive:
            return self._args

        try:
            argv = shlex.split(line)
        except ValueError as ex:
            print(f"error: {ex}", file=sys.stderr)
            return None

        try:
            return self._parsers[name].parse_args(shield_keys(argv))
        except SystemExit:
            # argparse already printed the usage
            return None


def build_argparser() -> tuple[argparse.ArgumentParser, dict[str, argparse.ArgumentParser]]:
    global_opts = argparse.ArgumentParser(
        prog="fracctl",
        description="Mint, inspect and convert fractional index keys.",
    )
    global_opts.add_argument("-c", "--config", help="Path to a fracindex configuration file")
    global_opts.add_argument(
        "--encoding",
        choices=[e.value for e in KeyEncoding],
        help="Encoding used to read and print keys (default from configuration: hex)",
    )
    global_opts.add_argument(
        "--output",
        choices=["yaml", "json"],
        help="Output format (default from configuration: yaml)",
    )
    global_opts.add_argument(
        "-l", "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity (default from configuration: WARNING)",
    )

    sub = global_opts.add_subparsers(dest="command")
    parsers: dict[str, argparse.ArgumentParser] = {}

    parsers["default"] = sub.add_parser("default", help="Print the starting key")

    for name in ("before", "after"):
        edge = sub.add_parser(name, help=f"Mint keys {name} a key")
        edge.add_argument("key")
        edge.add_argument("-n", "--count", type=positive_count, default=1)
        parsers[name] = edge

    between = sub.add_parser("between", help="Mint a key between two keys")
    between.add_argument("first")
    between.add_argument("second")
    between.add_argument("--strategy", choices=[s.value for s in BetweenStrategy])
    parsers["between"] = between

    inspect = sub.add_parser("inspect", help="Decode a key and show its parts")
    inspect.add_argument("key")
    parsers["inspect"] = inspect

    convert = sub.add_parser("convert", help="Re-encode a key")
    convert.add_argument("key")
    convert.add_argument("--to", required=True, choices=[e.value for e in KeyEncoding])
    parsers["convert"] = convert

    return global_opts, parsers


GLOBAL_VALUE_OPTIONS = frozenset({"-c", "--config", "--encoding", "--output", "-l", "--log-level"})
COMMAND_VALUE_OPTIONS = frozenset({"-n", "--count", "--strategy", "--to"})
COMMAND_FLAGS = frozenset({"-h", "--help"})


def shield_keys(argv: list[str]) -> list[str]:
    """
    Rewrite the arguments of one command so that keys starting with '-'
    (base64url and sortable text both produce some) stay positional.

    Options are kept in front; everything else goes after '--'.
    """
    options: list[str] = []
    keys: list[str] = []

    tokens = iter(argv)
    for token in tokens:
        if token == "--":
            keys.extend(tokens)
            break
        if token in COMMAND_VALUE_OPTIONS:
            options.append(token)
            value = next(tokens, None)
            if value is not None:
                options.append(value)
        elif token in COMMAND_FLAGS or token.split("=", 1)[0] in COMMAND_VALUE_OPTIONS:
            options.append(token)
        else:
            keys.append(token)

    return options + ["--", *keys] if keys else options


def shield_command_line(argv: list[str], commands: Iterable[str]) -> list[str]:
    """`shield_keys` applied to whatever follows the command name."""
    commands = set(commands)
    i = 0
    while i < len(argv):
        token = argv[i]
        if token in commands:
            return argv[:i + 1] + shield_keys(argv[i + 1:])
        i += 2 if token in GLOBAL_VALUE_OPTIONS else 1
    return list(argv)


def apply_overrides(config: FracIndexConfig, args: argparse.Namespace) -> FracIndexConfig:
    """Command line options win over the configuration file and environment."""
    output: dict[str, Any] = {}
    if args.encoding is not None:
        output["encoding"] = KeyEncoding(args.encoding)
    if args.output is not None:
        output["format"] = args.output

    update: dict[str, Any] = {}
    if output:
        update["output"] = config.output.model_copy(update=output)
    if args.log_level is not None:
        update["logging"] = config.logging.model_copy(update={"level": args.log_level})

    return config.model_copy(update=update) if update else config
