import logging
import os
from unittest.mock import MagicMock

# Must be set before prompt_ab (and ddtrace) read their configuration
os.environ["DD_TRACE_ENABLED"] = "false"
os.environ["PROMPT_AB_METRICS_ENABLED"] = "false"
os.environ.pop("PROMPT_AB_CONFIG_JSON", None)
os.environ.pop("PROMPT_AB_CONFIG_PATH", None)

import pytest

from prompt_ab.hooks import register


@pytest.fixture
def logger():
    """Stand-in logger so tests can assert on the literal log lines."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def make_plugin(logger):
    def _make(experiments):
        plugin = register({"experiments": experiments}, logger=logger)
        assert plugin is not None
        return plugin
    return _make

