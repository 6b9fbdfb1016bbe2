import random

import pytest
import yaml

from fracindex.bootstrap.deps import get_config, get_serializer
from fracindex.core.generator.generator import FractionalIndexGenerator
from fracindex.core.models.index import FractionalIndex


@pytest.fixture
def serializer():
    return get_serializer()


@pytest.fixture
def rng():
    return random.Random(7)


@pytest.fixture
def sequential_keys() -> list[FractionalIndex]:
    keys = [FractionalIndex.default()]
    for _ in range(63):
        keys.append(FractionalIndexGenerator.after(keys[-1]))
    return keys


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FRACINDEXCONFIG", raising=False)
    for name in ("FRACINDEX_GENERATOR__STRATEGY", "FRACINDEX_OUTPUT__ENCODING",
                 "FRACINDEX_OUTPUT__FORMAT", "FRACINDEX_LOGGING__LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_config.cache_clear()
    yield tmp_path
    get_config.cache_clear()


@pytest.fixture
def config_file(tmp_path):
    file = tmp_path / "custom.yaml"

    data = {
        "generator": {
            "strategy": "minimal"
        },
        "output": {
            "encoding": "sortable",
            "format": "json"
        },
        "logging": {
            "level": "DEBUG"
        }
    }

    file.write_text(yaml.safe_dump(data))
    return file
