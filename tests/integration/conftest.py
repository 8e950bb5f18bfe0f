# -*- coding: utf-8 -*-
# ------------------------------------------------------------------------------
#
#   Copyright 2024 Valory AG
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
#
# ------------------------------------------------------------------------------

"""Pytest configuration for integration tests."""

import pytest

from packages.opium.customs.deposits_scheduler.cache import ParameterCache
from tests.integration.protocols.base.mock_contracts import MockContractFactory


SCHEDULER_ADDRESS = "0x" + "5c" * 20
UNDERLYING_ADDRESS = "0x" + "e7" * 20
OTHER_UNDERLYING_ADDRESS = "0x" + "e8" * 20
POOL_ADDRESS = "0x" + "a1" * 20
OTHER_POOL_ADDRESS = "0x" + "a2" * 20


@pytest.fixture(scope="session")
def mock_contract_factory() -> MockContractFactory:
    """Provide mock contract factory for all tests."""
    return MockContractFactory


@pytest.fixture
def parameter_cache() -> ParameterCache:
    """Provide a parameter cache shared by the runs of a test."""
    return ParameterCache()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "contract: mark test as contract integration test"
    )
    config.addinivalue_line(
        "markers", "e2e: mark test as end-to-end test"
    )
    config.addinivalue_line(
        "markers", "opium: mark test as Opium protocol test"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test location."""
    for item in items:
        if "opium" in str(item.fspath):
            item.add_marker(pytest.mark.opium)

        if "contract_integration" in str(item.fspath):
            item.add_marker(pytest.mark.contract)
        elif "e2e_workflows" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)

        # All tests in integration directory are integration tests
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
