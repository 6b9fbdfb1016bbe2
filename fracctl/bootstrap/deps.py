import sys
from functools import lru_cache

from fracctl.core.cmd import FracCmd, apply_overrides, build_argparser, shield_command_line
from fracctl.core.dispatcher import CommandDispatcher
from fracctl.infra.format_renderer import RENDERERS
from fracindex.bootstrap.deps import get_config
from fracindex.core.helpers.utils import setup_logging


@lru_cache
def get_dispatcher() -> CommandDispatcher:
    return CommandDispatcher()


def build_cli(argv: list[str] | None = None) -> FracCmd:
    argparser, parsers = build_argparser()
    if argv is None:
        argv = sys.argv[1:]
    args = argparser.parse_args(shield_command_line(argv, parsers))

    config = apply_overrides(get_config(args.config), args)
    setup_logging(config.logging.level)

    renderer = RENDERERS[config.output.format](config.output.encoding)
    return FracCmd(get_dispatcher(), config, renderer, args)


@lru_cache
def get_cli() -> FracCmd:
    return build_cli(sys.argv[1:])
