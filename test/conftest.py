"""
Shared pytest configuration and fixtures for the provider settings tests.
"""

import pytest

from mediaprovider.config.system import SystemConfig, set_system_config, reset_system_config
from mediaprovider.provider_info import ProviderInfo


LANGUAGE_TOKENS = "bg|cs|da|de|el|en|es|fi|fr|he|hr|hu|it|ja|ko|nb|nl|no|pl|pt|ro|ru|sk|sl|sr|sv|th|tr|uk|zh".split("|")


@pytest.fixture(autouse=True)
def system_config(tmp_path):
    """
    Point the process-wide default settings directory at a temporary folder
    so no test touches the working directory.
    """
    config = SystemConfig(config_dir=str(tmp_path / "settings"))
    set_system_config(config)
    yield config
    reset_system_config()


@pytest.fixture
def settings_dir(tmp_path):
    directory = tmp_path / "target"
    directory.mkdir()
    return directory


@pytest.fixture
def make_provider():
    """Factory for providers declaring the reference set of entries."""
    def _make(provider_id="config"):
        mpi = ProviderInfo(provider_id, "name", "description")
        mpi.config.add_boolean("filterUnwantedCategories", False)
        mpi.config.add_boolean("useTmdb", False)
        mpi.config.add_boolean("scrapeCollectionInfo", True)
        mpi.config.add_boolean("someBool", True)
        mpi.config.add_text("someInput", "none")
        mpi.config.add_select("language", ["aa", "bb", "cc", "dd", "ee"], "dd")
        mpi.config.add_select_index("languageInt", LANGUAGE_TOKENS, "en")
        mpi.config.add_text("encrypted", "This is some encrypted text", True)
        return mpi
    return _make


@pytest.fixture
def provider(make_provider):
    return make_provider()
