import os
from pathlib import Path


CONFIG_ENV = "FRACINDEXCONFIG"
DEFAULT_CONFIGFILE = "fracindex.yaml"


def get_configfile(cli_path: str | None = None) -> Path | None:
    """
    Resolve the configuration file.

    Priority: CLI > ENV > default file in current working directory.
    An explicit path must exist; the default file is optional and
    None means built-in defaults only.
    """
    raw = cli_path or os.getenv(CONFIG_ENV)

    if raw is None:
        file = Path.cwd() / DEFAULT_CONFIGFILE
        return file if file.is_file() else None

    file = Path(raw).expanduser()
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            f"  - Or set the {CONFIG_ENV} environment variable\n"
            f"  - Or place a '{DEFAULT_CONFIGFILE}' file in the current working directory."
        )

    return file
