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

"""This module contains the class to connect to the Opium staking scheduler contract."""

from pathlib import Path

from web3 import Web3

from packages.opium.contracts.base import Contract, JSONLike


PUBLIC_ID = "opium/scheduler:0.1.0"


class SchedulerContract(Contract):
    """The Opium staking scheduler contract."""

    contract_id = PUBLIC_ID
    build_path = Path(__file__).parent / "build" / "scheduler.json"

    @classmethod
    def get_reserve_coefficient(
        cls,
        ledger_api: Web3,
        contract_address: str,
        key: str,
    ) -> JSONLike:
        """Get the reserve coefficient for an underlying asset or a pool."""
        contract_instance = cls.get_instance(ledger_api, contract_address)
        coefficient = contract_instance.functions.getReserveCoefficient(
            Web3.to_checksum_address(key)
        ).call()
        return dict(data=coefficient)

    @classmethod
    def build_execute_tx(
        cls,
        ledger_api: Web3,
        contract_address: str,
        user: str,
        pool: str,
    ) -> JSONLike:
        """Build an execute transaction for a scheduled deposit or withdrawal."""
        data = cls._encode_call(
            ledger_api,
            contract_address,
            "execute",
            (Web3.to_checksum_address(user), Web3.to_checksum_address(pool)),
        )
        return {"data": bytes.fromhex(data[2:])}
