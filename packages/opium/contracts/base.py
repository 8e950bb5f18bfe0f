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

"""This module contains the base class shared by the contract wrappers."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from web3 import Web3
from web3.contract import Contract as Web3Contract


JSONLike = Dict[str, Any]


@lru_cache(maxsize=None)
def load_abi(path: str) -> List[Dict[str, Any]]:
    """Load the ABI from a contract build file."""
    with open(path, "r", encoding="utf-8") as build_file:
        return json.load(build_file)["abi"]


class Contract:
    """Base contract wrapper bound to a build file."""

    contract_id: str = ""
    build_path: Optional[Path] = None

    @classmethod
    def get_abi(cls) -> List[Dict[str, Any]]:
        """Get the ABI of the wrapped contract."""
        if cls.build_path is None:
            raise ValueError(f"Contract {cls.__name__} has no build file.")
        return load_abi(str(cls.build_path))

    @classmethod
    def get_instance(
        cls, ledger_api: Web3, contract_address: Optional[str] = None
    ) -> Web3Contract:
        """Get a contract instance, bound to an address when one is given."""
        if contract_address is None:
            return ledger_api.eth.contract(abi=cls.get_abi())
        return ledger_api.eth.contract(
            address=Web3.to_checksum_address(contract_address), abi=cls.get_abi()
        )

    @classmethod
    def _encode_call(
        cls,
        ledger_api: Web3,
        contract_address: Optional[str],
        method_name: str,
        args: Tuple,
    ) -> str:
        contract_instance = cls.get_instance(ledger_api, contract_address)
        return contract_instance.encode_abi(method_name, args=args)
