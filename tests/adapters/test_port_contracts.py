"""Adapter contract tests.

Verify every source the adapters produce still satisfies the capability
protocols in ``src/lib_effective_config/application/ports.py`` so the engine
can report on it without knowing the concrete type.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from lib_effective_config.adapters.dotenv.default import DotEnvLoader
from lib_effective_config.adapters.env.default import EnvironmentSource
from lib_effective_config.adapters.file_loaders.structured import load_file_source
from lib_effective_config.application import ports


def test_environment_source_contract() -> None:
    source = EnvironmentSource(environ={"A": "1"})
    assert isinstance(source, ports.EnumerableSource)
    assert isinstance(source, ports.OriginLookup)
    assert not isinstance(source, ports.CompositeLike)


def test_dotenv_source_contract(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("A=1\n", encoding="utf-8")
    source = DotEnvLoader().load(str(env_file))
    assert isinstance(source, ports.EnumerableSource)
    assert isinstance(source, ports.OriginLookup)


@pytest.mark.parametrize(
    ("name", "body"),
    [
        ("config.toml", "[service]\nvalue = 1\n"),
        ("config.json", '{"service": {"value": 1}}'),
        ("config.yaml", "service:\n  value: 1\n"),
    ],
)
def test_structured_source_contract(tmp_path: Path, name: str, body: str) -> None:
    path = tmp_path / name
    path.write_text(body, encoding="utf-8")
    source = load_file_source(str(path))
    assert isinstance(source, ports.EnumerableSource)
    assert isinstance(source, ports.OriginLookup)
    assert source.get_property("service.value") == 1
