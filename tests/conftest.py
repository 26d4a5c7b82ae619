"""Shared test fixtures."""

from pathlib import Path

import pytest

from lv2hostconfig.core.store import ConfigurationStore

EQ_URI = "http://lsp-plug.in/plugins/lv2/para_equalizer_x8_mono"
COMP_URI = "http://lsp-plug.in/plugins/lv2/compressor_mono"

SAMPLE_DOCUMENT = f"""\
referenceLevel: -6.0
plugins:
  - pluginUri: {EQ_URI}
    parameters:
      g_in: linear(reference)
      g_out: "1.0"
      f_0: 0.50
  - pluginUri: {COMP_URI}
    parameters:
      al: decibel(0.5)
      cr: scale(5, 0, 10, 1, 8)
"""


@pytest.fixture
def sample_text() -> str:
    """YAML text of a two-plugin document."""
    return SAMPLE_DOCUMENT


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write the sample document to a temporary file."""
    f = tmp_path / "lv2host.yaml"
    f.write_text(SAMPLE_DOCUMENT)
    return f


@pytest.fixture
def store(sample_text: str) -> ConfigurationStore:
    """Store with the sample document loaded but not evaluated."""
    s = ConfigurationStore()
    s.load_text(sample_text)
    return s
