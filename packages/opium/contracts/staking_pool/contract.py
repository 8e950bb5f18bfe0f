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

"""This module contains the class to connect to an Opium staking pool contract."""

from pathlib import Path

from web3 import Web3

from packages.opium.contracts.base import Contract, JSONLike


PUBLIC_ID = "opium/staking_pool:0.1.0"


class StakingPoolContract(Contract):
    """The Opium staking pool contract."""

    contract_id = PUBLIC_ID
    build_path = Path(__file__).parent / "build" / "staking_pool.json"

    @classmethod
    def get_balance(
        cls,
        ledger_api: Web3,
        contract_address: str,
        account: str,
    ) -> JSONLike:
        """Get the pool token balance of the given account."""
        contract_instance = cls.get_instance(ledger_api, contract_address)
        balance = contract_instance.functions.balanceOf(
            Web3.to_checksum_address(account)
        ).call()
        return dict(data=balance)

    @classmethod
    def get_allowance(
        cls,
        ledger_api: Web3,
        contract_address: str,
        owner: str,
        spender: str,
    ) -> JSONLike:
        """Get the pool token allowance granted by the owner to the spender."""
        contract_instance = cls.get_instance(ledger_api, contract_address)
        allowance = contract_instance.functions.allowance(
            Web3.to_checksum_address(owner), Web3.to_checksum_address(spender)
        ).call()
        return dict(data=allowance)

    @classmethod
    def get_underlying(
        cls,
        ledger_api: Web3,
        contract_address: str,
    ) -> JSONLike:
        """Get the underlying asset of the pool."""
        contract_instance = cls.get_instance(ledger_api, contract_address)
        underlying = contract_instance.functions.underlying().call()
        return dict(data=underlying)

    @classmethod
    def get_derivative(
        cls,
        ledger_api: Web3,
        contract_address: str,
    ) -> JSONLike:
        """Get the derivative the pool is staking into."""
        contract_instance = cls.get_instance(ledger_api, contract_address)
        notional, maturity, token, synthetic_id, oracle_id = (
            contract_instance.functions.derivative().call()
        )
        return dict(
            notional=notional,
            maturity=maturity,
            token=token,
            synthetic_id=synthetic_id,
            oracle_id=oracle_id,
        )

    @classmethod
    def get_epoch_length(
        cls,
        ledger_api: Web3,
        contract_address: str,
    ) -> JSONLike:
        """Get the epoch length of the pool."""
        contract_instance = cls.get_instance(ledger_api, contract_address)
        epoch = contract_instance.functions.EPOCH().call()
        return dict(data=epoch)

    @classmethod
    def get_staking_phase_length(
        cls,
        ledger_api: Web3,
        contract_address: str,
    ) -> JSONLike:
        """Get the staking phase length of the pool."""
        contract_instance = cls.get_instance(ledger_api, contract_address)
        staking_phase = contract_instance.functions.STAKING_PHASE().call()
        return dict(data=staking_phase)

    @classmethod
    def get_time_delta(
        cls,
        ledger_api: Web3,
        contract_address: str,
    ) -> JSONLike:
        """Get the time delta buffer of the pool."""
        contract_instance = cls.get_instance(ledger_api, contract_address)
        time_delta = contract_instance.functions.TIME_DELTA().call()
        return dict(data=time_delta)
