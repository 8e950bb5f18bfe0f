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

"""This module contains the data models and parameters of the deposits scheduler keeper."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple, Type, Union


SUBGRAPH_BASE_URL = "https://api.thegraph.com/subgraphs/name/opiumprotocol/"
PAGE_LIMIT = 100
BATCH_SIZE = 5
REQUEST_TIMEOUT = 5
MAX_WORKERS = 1


class SchedulerType(Enum):
    """Kind of scheduled action a scheduler contract executes."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"

    @classmethod
    def from_value(cls, value: Any) -> "SchedulerType":
        """Anything other than "deposit" is a withdrawal scheduler."""
        if value == cls.DEPOSIT.value:
            return cls.DEPOSIT
        return cls.WITHDRAWAL


class Params:
    """Parameters of the deposits scheduler keeper."""

    def __init__(self, **kwargs: Any) -> None:
        """Initialize the parameters, falling back to the defaults."""
        self.subgraph_base_url = self._ensure(
            "subgraph_base_url", kwargs, str, SUBGRAPH_BASE_URL
        )
        self.page_limit = self._ensure_positive("page_limit", kwargs, int, PAGE_LIMIT)
        self.batch_size = self._ensure_positive("batch_size", kwargs, int, BATCH_SIZE)
        self.request_timeout = self._ensure_positive(
            "request_timeout", kwargs, (int, float), REQUEST_TIMEOUT
        )
        self.max_workers = self._ensure_positive(
            "max_workers", kwargs, int, MAX_WORKERS
        )
        self.cache_read_failures = self._ensure(
            "cache_read_failures", kwargs, bool, True
        )

    @staticmethod
    def _ensure(
        key: str,
        kwargs: Dict[str, Any],
        type_: Union[Type, Tuple[Type, ...]],
        default: Any,
    ) -> Any:
        """Get and check the type of a parameter."""
        value = kwargs.get(key)
        if value is None:
            return default
        accepted = type_ if isinstance(type_, tuple) else (type_,)
        if isinstance(value, bool) and bool not in accepted:
            raise ValueError(f"Parameter '{key}' must be of type {type_}, got bool.")
        if not isinstance(value, accepted):
            raise ValueError(
                f"Parameter '{key}' must be of type {type_}, got {type(value).__name__}."
            )
        return value

    @classmethod
    def _ensure_positive(
        cls,
        key: str,
        kwargs: Dict[str, Any],
        type_: Union[Type, Tuple[Type, ...]],
        default: Any,
    ) -> Any:
        value = cls._ensure(key, kwargs, type_, default)
        if value <= 0:
            raise ValueError(f"Parameter '{key}' must be positive, got {value}.")
        return value


@dataclass(frozen=True)
class ScheduledDeposit:
    """A deposit scheduled by a user into a staking pool."""

    user: str
    pool: str
    scheduled: int

    @classmethod
    def from_subgraph(cls, row: Dict[str, Any]) -> "ScheduledDeposit":
        """Build a scheduled deposit from a subgraph row."""
        return cls(user=row["user"], pool=row["pool"], scheduled=int(row["scheduled"]))


@dataclass(frozen=True)
class ScheduledWithdrawal:
    """A withdrawal scheduled by a user from a staking pool."""

    user: str
    pool: str

    @classmethod
    def from_subgraph(cls, row: Dict[str, Any]) -> "ScheduledWithdrawal":
        """Build a scheduled withdrawal from a subgraph row."""
        return cls(user=row["user"], pool=row["pool"])


@dataclass(frozen=True)
class StakingPhaseWindow:
    """Staking phase of a pool, derived from its derivative maturity."""

    maturity: int
    epoch_length: int
    staking_phase_length: int
    time_delta: int

    @property
    def start(self) -> int:
        """Exclusive lower bound of the staking phase."""
        return self.maturity - self.epoch_length + self.time_delta

    @property
    def end(self) -> int:
        """Exclusive upper bound of the staking phase."""
        return (
            self.maturity
            - self.epoch_length
            + self.staking_phase_length
            - self.time_delta
        )

    def contains(self, block_time: int) -> bool:
        """Check whether the block time falls strictly inside the window."""
        return self.start < block_time < self.end


@dataclass(frozen=True)
class ExecutionDecision:
    """Decision handed back to the automation host."""

    can_exec: bool
    call_data: str = ""

    def as_result(self) -> Dict[str, Union[bool, str]]:
        """Render the decision in the host's result format."""
        return {"canExec": self.can_exec, "callData": self.call_data}
