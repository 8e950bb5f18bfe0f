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

"""This module contains the class to encode calls to the Multicall contract."""

from pathlib import Path
from typing import List, Tuple

from web3 import Web3

from packages.opium.contracts.base import Contract, JSONLike


PUBLIC_ID = "opium/multicall:0.1.0"


class MulticallContract(Contract):
    """The Multicall contract."""

    contract_id = PUBLIC_ID
    build_path = Path(__file__).parent / "build" / "multicall.json"

    @classmethod
    def build_aggregate_tx(
        cls,
        ledger_api: Web3,
        calls: List[Tuple[str, bytes]],
    ) -> JSONLike:
        """
        Build an aggregate transaction bundling the given calls.

        The Multicall deployment is chosen by whoever submits the transaction,
        so no contract address is needed to encode it.

        :param ledger_api: the web3 connection, only its codec is used.
        :param calls: (target, call data) pairs, in execution order.
        :return: the encoded call as a 0x-prefixed hex string.
        """
        checksummed_calls = [
            (Web3.to_checksum_address(target), call_data)
            for target, call_data in calls
        ]
        data = cls._encode_call(ledger_api, None, "aggregate", (checksummed_calls,))
        return dict(data=data)
