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

"""This module contains the eligibility checks of scheduled deposits and withdrawals."""

import logging

from web3 import Web3

from packages.opium.contracts.scheduler.contract import SchedulerContract
from packages.opium.contracts.staking_pool.contract import StakingPoolContract
from packages.opium.customs.deposits_scheduler.cache import (
    ParameterCache,
    RESERVE_COEFFICIENT,
    STAKING_PHASE,
    UNDERLYING,
)
from packages.opium.customs.deposits_scheduler.models import (
    ScheduledDeposit,
    ScheduledWithdrawal,
    StakingPhaseWindow,
)


logger = logging.getLogger(__name__)


class _UncachedReadFailure(Exception):
    """A staking phase read failed and must not be cached."""


class EligibilityEvaluator:
    """Decide whether scheduled actions are executable at a given block time."""

    def __init__(
        self,
        ledger_api: Web3,
        scheduler_address: str,
        block_time: int,
        cache: ParameterCache,
        cache_read_failures: bool = True,
    ) -> None:
        """Initialize the evaluator."""
        self.ledger_api = ledger_api
        self.scheduler_address = scheduler_address
        self.block_time = block_time
        self.cache = cache
        self.cache_read_failures = cache_read_failures

    def get_underlying(self, pool: str) -> str:
        """Get the underlying asset of a pool."""
        return self.cache.get_or_compute(
            UNDERLYING,
            pool,
            lambda: StakingPoolContract.get_underlying(self.ledger_api, pool)["data"],
        )

    def get_reserve_coefficient(self, key: str) -> int:
        """Get the reserve coefficient the scheduler holds for an asset or a pool."""
        return self.cache.get_or_compute(
            RESERVE_COEFFICIENT,
            key,
            lambda: SchedulerContract.get_reserve_coefficient(
                self.ledger_api, self.scheduler_address, key
            )["data"],
        )

    def get_staking_phase_window(self, pool: str) -> StakingPhaseWindow:
        """Read the staking phase window of a pool from the chain."""
        derivative = StakingPoolContract.get_derivative(self.ledger_api, pool)
        epoch_length = StakingPoolContract.get_epoch_length(self.ledger_api, pool)
        staking_phase_length = StakingPoolContract.get_staking_phase_length(
            self.ledger_api, pool
        )
        time_delta = StakingPoolContract.get_time_delta(self.ledger_api, pool)
        return StakingPhaseWindow(
            maturity=int(derivative["maturity"]),
            epoch_length=int(epoch_length["data"]),
            staking_phase_length=int(staking_phase_length["data"]),
            time_delta=int(time_delta["data"]),
        )

    def is_staking_phase(self, pool: str) -> bool:
        """
        Check whether a pool is in its staking phase.

        The outcome is cached per pool for the lifetime of the cache, and so is
        a failed read (as `False`) unless `cache_read_failures` is disabled.
        """

        def compute() -> bool:
            try:
                window = self.get_staking_phase_window(pool)
            except Exception as e:  # pylint: disable=broad-except
                logger.warning(f"Could not read the staking phase of pool {pool}: {e}")
                if not self.cache_read_failures:
                    raise _UncachedReadFailure(pool) from e
                return False
            return window.contains(self.block_time)

        try:
            return self.cache.get_or_compute(STAKING_PHASE, pool, compute)
        except _UncachedReadFailure:
            return False

    def get_scheduled_withdrawal(self, user: str, pool: str) -> int:
        """
        Get the amount a scheduled withdrawal would execute.

        Only fully pre-approved withdrawals count: the user's whole pool token
        balance when the scheduler may spend all of it, zero otherwise.
        """
        try:
            balance = StakingPoolContract.get_balance(self.ledger_api, pool, user)["data"]
        except Exception as e:  # pylint: disable=broad-except
            logger.error(f"Could not read the balance of {user} in pool {pool}: {e}")
            return 0

        try:
            allowance = StakingPoolContract.get_allowance(
                self.ledger_api, pool, user, self.scheduler_address
            )["data"]
        except Exception as e:  # pylint: disable=broad-except
            logger.error(f"Could not read the allowance of {user} in pool {pool}: {e}")
            return 0

        if allowance >= balance:
            return balance
        return 0

    def is_deposit_eligible(self, deposit: ScheduledDeposit) -> bool:
        """Check a scheduled deposit against its underlying reserve coefficient."""
        coefficient = self.get_reserve_coefficient(self.get_underlying(deposit.pool))
        is_staking_phase = self.is_staking_phase(deposit.pool)

        eligible = deposit.scheduled > coefficient and is_staking_phase
        logger.debug(
            f"Deposit of {deposit.user} into {deposit.pool}: scheduled={deposit.scheduled} "
            f"coefficient={coefficient} staking_phase={is_staking_phase} eligible={eligible}"
        )
        return eligible

    def is_withdrawal_eligible(self, withdrawal: ScheduledWithdrawal) -> bool:
        """Check a scheduled withdrawal against its pool reserve coefficient."""
        coefficient = self.get_reserve_coefficient(withdrawal.pool)
        scheduled = self.get_scheduled_withdrawal(withdrawal.user, withdrawal.pool)
        is_staking_phase = self.is_staking_phase(withdrawal.pool)

        eligible = scheduled > coefficient and is_staking_phase
        logger.debug(
            f"Withdrawal of {withdrawal.user} from {withdrawal.pool}: scheduled={scheduled} "
            f"coefficient={coefficient} staking_phase={is_staking_phase} eligible={eligible}"
        )
        return eligible
