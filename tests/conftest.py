"""
Shared fixtures for the options tests.
"""

from unittest.mock import MagicMock

import pytest

from options.schema import OptionEntry, OptionsConfig
from options.service import OptionsService
from storage.memory import MemoryOptionsBackend
from validation.helper import ValidationHelper


@pytest.fixture
def options_config():
    return OptionsConfig(
        backend_key="seo_site_options",
        options={
            "lang": OptionEntry("lang", "en", ("non_empty_string",)),
            "website_name": OptionEntry("website_name", "", ("empty_string", "string")),
            "keyword_analysis_active": OptionEntry("keyword_analysis_active", True, ("boolean",)),
            "og_default_image": OptionEntry(
                "og_default_image", "", ("empty_string", "url"), exclude_from_secondary_context=True
            ),
            "unvalidated": OptionEntry("unvalidated", "x"),
        },
        secondary_backend_key="seo_network_options",
    )


@pytest.fixture
def backend():
    return MemoryOptionsBackend()


@pytest.fixture
def validator():
    """Real ValidationHelper wrapped so calls can be asserted on."""
    return MagicMock(wraps=ValidationHelper())


@pytest.fixture
def service(options_config, backend, validator):
    return OptionsService(options_config, backend, validator)
