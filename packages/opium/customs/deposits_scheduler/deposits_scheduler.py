# -*- coding: utf-8 -*-
# ------------------------------------------------------------------------------
#
#   Copyright 2023-2024 Valory AG
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

"""This module contains the entry point of the deposits scheduler keeper."""

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional, Union

from web3 import Web3

from packages.opium.contracts.scheduler.contract import SchedulerContract
from packages.opium.customs.deposits_scheduler.batch import (
    build_batch,
    encode_multicall,
)
from packages.opium.customs.deposits_scheduler.cache import ParameterCache
from packages.opium.customs.deposits_scheduler.eligibility import (
    EligibilityEvaluator,
)
from packages.opium.customs.deposits_scheduler.models import (
    ExecutionDecision,
    Params,
    SchedulerType,
)
from packages.opium.customs.deposits_scheduler.subgraph import (
    fetch_all_scheduled_deposits,
    fetch_all_scheduled_withdrawals,
)


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("scheduler_type", "scheduler_address", "subgraph_name", "block_time")
OPTIONAL_FIELDS = (
    "ledger_api",
    "rpc_url",
    "parameter_cache",
    "subgraph_base_url",
    "page_limit",
    "batch_size",
    "request_timeout",
    "max_workers",
    "cache_read_failures",
)
HOST_ARG_ALIASES = {
    "schedulerType": "scheduler_type",
    "schedulerAddress": "scheduler_address",
    "subgraphName": "subgraph_name",
    "blockTime": "block_time",
}


def normalize_host_args(kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """Map the host's argument names onto the keeper's ones."""
    normalized = dict(kwargs)
    for alias, field in HOST_ARG_ALIASES.items():
        if alias in normalized:
            value = normalized.pop(alias)
            normalized.setdefault(field, value)
    return normalized


def check_missing_fields(kwargs: Dict[str, Any]) -> List[str]:
    """Check for missing fields and return them, if any."""
    return [field for field in REQUIRED_FIELDS if kwargs.get(field) is None]


def remove_irrelevant_fields(kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """Remove the irrelevant fields from the given kwargs."""
    relevant = REQUIRED_FIELDS + OPTIONAL_FIELDS
    return {key: value for key, value in kwargs.items() if key in relevant}


@lru_cache(maxsize=8)
def get_web3_connection(rpc_url: str) -> Web3:
    """Get or create a Web3 connection with caching."""
    return Web3(Web3.HTTPProvider(rpc_url))


class DepositsScheduler:
    """
    Evaluator of scheduled deposits and withdrawals.

    Every check fetches the scheduled actions afresh; only the parameter
    cache outlives a check, so reusing an instance reuses its cache.
    """

    def __init__(
        self,
        ledger_api: Web3,
        params: Optional[Params] = None,
        cache: Optional[ParameterCache] = None,
    ) -> None:
        """Initialize the scheduler."""
        self.ledger_api = ledger_api
        self.params = params if params is not None else Params()
        self.cache = cache if cache is not None else ParameterCache()

    def subgraph_url(self, subgraph_name: str) -> str:
        """Get the endpoint of a subgraph."""
        return self.params.subgraph_base_url + subgraph_name

    def check(
        self,
        scheduler_type: str,
        scheduler_address: str,
        subgraph_name: str,
        block_time: int,
    ) -> ExecutionDecision:
        """Run the pipeline matching the scheduler type."""
        if SchedulerType.from_value(scheduler_type) is SchedulerType.DEPOSIT:
            return self.check_deposits(scheduler_address, subgraph_name, block_time)
        return self.check_withdrawals(scheduler_address, subgraph_name, block_time)

    def check_deposits(
        self, scheduler_address: str, subgraph_name: str, block_time: int
    ) -> ExecutionDecision:
        """Decide which scheduled deposits to execute."""
        deposits = fetch_all_scheduled_deposits(
            self.subgraph_url(subgraph_name),
            page_limit=self.params.page_limit,
            timeout=self.params.request_timeout,
        )
        logger.info(f"Total fetched length: {len(deposits)}")

        evaluator = self._evaluator(scheduler_address, block_time)
        batch = build_batch(
            deposits,
            evaluator.is_deposit_eligible,
            lambda deposit: self._encode_execute(
                scheduler_address, deposit.user, deposit.pool
            ),
            batch_size=self.params.batch_size,
            max_workers=self.params.max_workers,
        )
        logger.info(f"Result batch length: {len(batch)}")

        return encode_multicall(self.ledger_api, scheduler_address, batch)

    def check_withdrawals(
        self, scheduler_address: str, subgraph_name: str, block_time: int
    ) -> ExecutionDecision:
        """Decide which scheduled withdrawals to execute."""
        withdrawals = fetch_all_scheduled_withdrawals(
            self.subgraph_url(subgraph_name),
            page_limit=self.params.page_limit,
            timeout=self.params.request_timeout,
        )
        logger.info(f"Total fetched length: {len(withdrawals)}")

        evaluator = self._evaluator(scheduler_address, block_time)
        batch = build_batch(
            withdrawals,
            evaluator.is_withdrawal_eligible,
            lambda withdrawal: self._encode_execute(
                scheduler_address, withdrawal.user, withdrawal.pool
            ),
            batch_size=self.params.batch_size,
            max_workers=self.params.max_workers,
        )
        logger.info(f"Result batch length: {len(batch)}")

        return encode_multicall(self.ledger_api, scheduler_address, batch)

    def _evaluator(self, scheduler_address: str, block_time: int) -> EligibilityEvaluator:
        return EligibilityEvaluator(
            self.ledger_api,
            scheduler_address,
            block_time,
            self.cache,
            cache_read_failures=self.params.cache_read_failures,
        )

    def _encode_execute(self, scheduler_address: str, user: str, pool: str) -> bytes:
        return SchedulerContract.build_execute_tx(
            self.ledger_api, scheduler_address, user, pool
        )["data"]


def run(*_args, **kwargs) -> Dict[str, Union[bool, str]]:
    """Run the keeper once and return its decision, or an error."""
    kwargs = normalize_host_args(kwargs)
    user_args = {field: kwargs.get(field) for field in REQUIRED_FIELDS}
    logger.info(f"User args: {user_args}")

    missing = check_missing_fields(kwargs)
    if len(missing) > 0:
        return {"error": f"Required kwargs {missing} were not provided."}

    kwargs = remove_irrelevant_fields(kwargs)
    block_time = kwargs["block_time"]
    if isinstance(block_time, bool) or not isinstance(block_time, int):
        return {"error": f"block_time must be an integer, got {block_time!r}."}

    ledger_api = kwargs.get("ledger_api")
    if ledger_api is None:
        rpc_url = kwargs.get("rpc_url")
        if rpc_url is None:
            return {"error": "Either ledger_api or rpc_url must be provided."}
        ledger_api = get_web3_connection(rpc_url)

    try:
        params = Params(**kwargs)
    except ValueError as e:
        return {"error": str(e)}

    scheduler = DepositsScheduler(
        ledger_api, params=params, cache=kwargs.get("parameter_cache")
    )
    try:
        decision = scheduler.check(
            kwargs["scheduler_type"],
            kwargs["scheduler_address"],
            kwargs["subgraph_name"],
            block_time,
        )
    except Exception as e:  # pylint: disable=broad-except
        error_msg = f"Error checking scheduled actions: {e}"
        logger.error(error_msg)
        return {"error": error_msg}

    logger.info(f"Decision: {decision.as_result()}")
    return decision.as_result()
