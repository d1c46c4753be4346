"""
Shared fixtures for the test suites.
"""

import pytest

from ayeaye import Api, ApiConfig

from tests.controllers import RootController


@pytest.fixture
def config():
    """Configuration that does not depend on the process environment."""
    return ApiConfig()


@pytest.fixture
def root():
    return RootController()


@pytest.fixture
def api(root, config):
    return Api(root, config=config)
