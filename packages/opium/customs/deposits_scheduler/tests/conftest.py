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

"""Shared fixtures for the deposits scheduler tests."""

from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from web3 import Web3

from packages.opium.customs.deposits_scheduler.cache import ParameterCache


SCHEDULER_ADDRESS = "0x" + "5c" * 20
POOL_ADDRESS = "0x" + "a1" * 20
OTHER_POOL_ADDRESS = "0x" + "a2" * 20
UNDERLYING_ADDRESS = "0x" + "e7" * 20
USER_ADDRESS = "0x" + "0b" * 20
BLOCK_TIME = 920


def make_address(index: int) -> str:
    """Make a distinct lowercase address, as the subgraph returns them."""
    return "0x" + f"{index:040x}"


def make_response(payload: Any) -> MagicMock:
    """Make a mocked successful HTTP response."""
    response = MagicMock()
    response.status_code = 200
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


def make_pages(entity: str, sizes: List[int], row: Optional[Dict[str, Any]] = None) -> List[MagicMock]:
    """Make one mocked subgraph response per page size."""
    responses = []
    counter = 0
    for size in sizes:
        records = []
        for _ in range(size):
            record = dict(row) if row else {"user": make_address(counter + 1), "pool": POOL_ADDRESS}
            records.append(record)
            counter += 1
        responses.append(make_response({"data": {entity: records}}))
    return responses


def make_staking_pool_instance(
    underlying: str = UNDERLYING_ADDRESS,
    maturity: int = 1000,
    epoch: int = 100,
    staking_phase: int = 50,
    time_delta: int = 5,
    balance: int = 0,
    allowance: int = 0,
) -> MagicMock:
    """Make a mocked staking pool contract instance."""
    instance = MagicMock()
    instance.functions.underlying.return_value.call.return_value = underlying
    instance.functions.derivative.return_value.call.return_value = (
        10**18,
        maturity,
        "0x" + "11" * 20,
        "0x" + "22" * 20,
        "0x" + "33" * 20,
    )
    instance.functions.EPOCH.return_value.call.return_value = epoch
    instance.functions.STAKING_PHASE.return_value.call.return_value = staking_phase
    instance.functions.TIME_DELTA.return_value.call.return_value = time_delta
    instance.functions.balanceOf.return_value.call.return_value = balance
    instance.functions.allowance.return_value.call.return_value = allowance
    return instance


def make_scheduler_instance(coefficient: int = 0) -> MagicMock:
    """Make a mocked scheduler contract instance."""
    instance = MagicMock()
    instance.functions.getReserveCoefficient.return_value.call.return_value = coefficient
    return instance


@pytest.fixture
def w3() -> Web3:
    """A connection-less Web3, enough to encode calls."""
    return Web3()


@pytest.fixture
def cache() -> ParameterCache:
    """A fresh parameter cache."""
    return ParameterCache()
