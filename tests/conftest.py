"""
Shared pytest fixtures for the Allfiled mapping tests.

Provides:
- isolation of the global mapping config and dictionary index
- small in-memory mapping graphs built from statements
- a DictionaryIndex and AllfiledMapping over the bundled definition
"""

import pytest

import config.mapping_config as mapping_config
from application.services.allfiled_mapping import AllfiledMapping
from application.services.dictionary_index import DictionaryIndex, reset_dictionary_index
from infrastructure.graph_reader import BUNDLED_MAPPING_PATH, read_statements
from infrastructure.memory_graph import MappingGraph


ALLFILED_ENV_VARS = (
    "ALLFILED_CONFIG_PATH",
    "ALLFILED_MAPPING_PATH",
    "ALLFILED_CONTEXT",
    "ALLFILED_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_globals(monkeypatch, tmp_path):
    """Reset the cached config and shared index around every test."""
    for name in ALLFILED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ALLFILED_CONFIG_PATH", str(tmp_path / "missing.yaml"))
    monkeypatch.setattr(mapping_config, "_config", None)
    reset_dictionary_index()
    yield
    reset_dictionary_index()


def build_graph(*statements: str) -> MappingGraph:
    """Build a mapping graph from statement strings."""
    return read_statements(statements, MappingGraph(name="test"))


@pytest.fixture
def small_graph():
    """Two Allfiled fields, one multi-hop canonical chain and an XDI synonym."""
    return build_graph(
        "+(https://allfiled.com/)+(+(personal))+(+(person))+(+(forename))/$is/+(+first)+(+name)",
        "+(https://allfiled.com/)+(+(personal))+(+(contact))+(+(email))/$is/+(+email)",
        "+(https://allfiled.com/)+(+(personal))+(+(person))+(+(givenname))/$is/+(+given)+(+name)",
        "+(+given)+(+name)/$is/+(+first)+(+name)",
    )


@pytest.fixture
def bundled_index():
    """Validated index over the bundled mapping definition."""
    return DictionaryIndex.from_resource(BUNDLED_MAPPING_PATH)


@pytest.fixture
def mapping(bundled_index):
    """Allfiled mapping over the bundled definition."""
    return AllfiledMapping(bundled_index)


@pytest.fixture
def small_mapping(small_graph):
    """Allfiled mapping over the small test graph."""
    return AllfiledMapping(DictionaryIndex(small_graph))


@pytest.fixture
def graph_from():
    """Factory building a mapping graph from statement strings."""
    return build_graph
