import pytest
import yaml

from fracindex.bootstrap.config.loader import get_configfile
from fracindex.bootstrap.config.settings import FracIndexConfig
from fracindex.bootstrap.deps import get_config
from fracindex.core.codec.transport import KeyEncoding
from fracindex.core.generator.minor import BetweenStrategy


@pytest.mark.ut
def test_defaults_without_configuration_file(clean_env):
    assert get_configfile() is None

    config = get_config()

    assert config.generator.strategy is BetweenStrategy.spread
    assert config.output.encoding is KeyEncoding.hex
    assert config.output.format == "yaml"
    assert config.logging.level == "WARNING"


@pytest.mark.ut
def test_explicit_configuration_file(clean_env, config_file):
    config = get_config(str(config_file))

    assert config.generator.strategy is BetweenStrategy.minimal
    assert config.output.encoding is KeyEncoding.sortable
    assert config.output.format == "json"
    assert config.logging.level == "DEBUG"


@pytest.mark.ut
def test_configuration_file_from_environment(clean_env, config_file, monkeypatch):
    monkeypatch.setenv("FRACINDEXCONFIG", str(config_file))
    assert get_configfile() == config_file


@pytest.mark.ut
def test_cli_path_wins_over_environment(clean_env, config_file, tmp_path, monkeypatch):
    other = tmp_path / "other.yaml"
    other.write_text(yaml.safe_dump({"output": {"encoding": "base64"}}))
    monkeypatch.setenv("FRACINDEXCONFIG", str(other))

    assert get_configfile(str(config_file)) == config_file


@pytest.mark.ut
def test_default_file_in_working_directory(clean_env):
    default = clean_env / "fracindex.yaml"
    default.write_text(yaml.safe_dump({"output": {"encoding": "base64url"}}))

    assert get_configfile() == default
    assert get_config().output.encoding is KeyEncoding.base64url


@pytest.mark.ut
def test_missing_explicit_file_is_fatal(clean_env):
    with pytest.raises(SystemExit, match="Configuration file not found"):
        get_configfile(str(clean_env / "nope.yaml"))


@pytest.mark.ut
def test_environment_overrides_file(clean_env, config_file, monkeypatch):
    monkeypatch.setenv("FRACINDEX_OUTPUT__ENCODING", "hex")
    monkeypatch.setenv("FRACINDEX_GENERATOR__STRATEGY", "spread")

    config = FracIndexConfig.load(config_file)

    assert config.output.encoding is KeyEncoding.hex
    assert config.generator.strategy is BetweenStrategy.spread
    assert config.output.format == "json"


@pytest.mark.ut
def test_validation_errors_name_the_field(clean_env, tmp_path):
    file = tmp_path / "bad.yaml"
    file.write_text(yaml.safe_dump({"output": {"encoding": "rot13"}}))

    with pytest.raises(SystemExit) as ex:
        get_config(str(file))

    assert "Configuration validation failed" in str(ex.value)
    assert "output.encoding" in str(ex.value)


@pytest.mark.ut
def test_load_does_not_leak_the_file_into_later_loads(clean_env, config_file):
    FracIndexConfig.load(config_file)
    assert FracIndexConfig.load().output.encoding is KeyEncoding.hex
