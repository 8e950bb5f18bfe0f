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

"""This module contains the batch selection and the multicall encoding of execution calls."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Sequence, TypeVar

from web3 import Web3

from packages.opium.contracts.multicall.contract import MulticallContract
from packages.opium.customs.deposits_scheduler.models import (
    BATCH_SIZE,
    ExecutionDecision,
)


logger = logging.getLogger(__name__)

Candidate = TypeVar("Candidate")


def build_batch(
    candidates: Sequence[Candidate],
    is_eligible: Callable[[Candidate], bool],
    encode_call: Callable[[Candidate], bytes],
    batch_size: int = BATCH_SIZE,
    max_workers: int = 1,
) -> List[bytes]:
    """
    Select the first eligible candidates, in order, up to the batch size.

    The scan stops as soon as the batch is full. With several workers,
    candidates are checked concurrently in windows no larger than the number
    of free slots left, so exactly the candidates a sequential scan would
    check are checked and the batch keeps the candidates' order.

    :param candidates: the candidates, in retrieval order.
    :param is_eligible: the eligibility check of a single candidate.
    :param encode_call: the encoder of a candidate's execution call.
    :param batch_size: the maximum number of calls in the batch.
    :param max_workers: the number of candidates checked concurrently.
    :return: the encoded execution calls.
    """
    batch: List[bytes] = []

    if max_workers <= 1:
        for candidate in candidates:
            if len(batch) >= batch_size:
                break
            if is_eligible(candidate):
                batch.append(encode_call(candidate))
        return batch

    position = 0
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        while len(batch) < batch_size and position < len(candidates):
            window = candidates[position : position + batch_size - len(batch)]
            position += len(window)
            for candidate, eligible in zip(window, executor.map(is_eligible, window)):
                if eligible:
                    batch.append(encode_call(candidate))
    return batch


def encode_multicall(
    ledger_api: Web3, target: str, batch: List[bytes]
) -> ExecutionDecision:
    """Bundle the batch into a single aggregate call against the target."""
    if not batch:
        return ExecutionDecision(can_exec=False, call_data="")

    call_data = MulticallContract.build_aggregate_tx(
        ledger_api, [(target, call) for call in batch]
    )["data"]
    return ExecutionDecision(can_exec=True, call_data=call_data)
