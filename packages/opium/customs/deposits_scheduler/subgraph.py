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

"""This module contains the paginated queries of scheduled actions from the Opium subgraphs."""

import logging
from typing import Any, Callable, Dict, List, TypeVar, Union

import requests

from packages.opium.customs.deposits_scheduler.models import (
    PAGE_LIMIT,
    REQUEST_TIMEOUT,
    ScheduledDeposit,
    ScheduledWithdrawal,
)


logger = logging.getLogger(__name__)

DEPOSITS = "deposits"
WITHDRAWALS = "withdrawals"

DEPOSITS_QUERY = """
{{
  deposits(where: {{ scheduled_gt: 0 }}, first: {first}, skip: {skip}) {{
    user
    pool
    scheduled
  }}
}}
"""

WITHDRAWALS_QUERY = """
{{
  withdrawals(where: {{ scheduled: true }}, first: {first}, skip: {skip}) {{
    user
    pool
  }}
}}
"""

Record = TypeVar("Record")


class SubgraphQueryError(Exception):
    """Exception raised when a subgraph answers with an unusable payload."""


def run_query(
    url: str, query: str, timeout: Union[int, float] = REQUEST_TIMEOUT
) -> Dict[str, Any]:
    """Run a GraphQL query once, without retries."""
    response = requests.post(
        url,
        json={"query": query},
        headers={"Content-Type": "application/json"},
        timeout=timeout,
    )
    response.raise_for_status()
    result = response.json()
    if not isinstance(result, dict):
        raise SubgraphQueryError(f"Unexpected response from {url}: {result!r}")
    if "errors" in result:
        raise SubgraphQueryError(f"GraphQL Errors: {result['errors']}")
    data = result.get("data")
    if not isinstance(data, dict):
        raise SubgraphQueryError(f"No data returned from {url}.")
    return data


def fetch_all_pages(
    url: str,
    entity: str,
    query_template: str,
    page_limit: int = PAGE_LIMIT,
    timeout: Union[int, float] = REQUEST_TIMEOUT,
) -> List[Dict[str, Any]]:
    """
    Fetch every record of an entity, one page at a time.

    Paging stops on the first page holding fewer than `page_limit` records,
    so a total that is an exact multiple of the limit costs one extra, empty
    request.

    :param url: the subgraph endpoint.
    :param entity: the queried entity, also the key of the page in the response.
    :param query_template: the query, formatted with `first` and `skip`.
    :param page_limit: the number of records requested per page.
    :param timeout: the timeout of each request, in seconds.
    :return: the raw records, in the order the subgraph returned them.
    """
    records: List[Dict[str, Any]] = []
    skip = 0
    last_page_size = page_limit

    while last_page_size >= page_limit:
        query = query_template.format(first=page_limit, skip=skip)
        data = run_query(url, query, timeout)

        page = data.get(entity)
        if not isinstance(page, list):
            raise SubgraphQueryError(f"No {entity} found in response from {url}.")
        logger.debug(f"Fetched {len(page)} {entity} (skip={skip})")

        records.extend(page)
        last_page_size = len(page)
        skip += last_page_size

    return records


def _parse_records(
    rows: List[Dict[str, Any]], parse: Callable[[Dict[str, Any]], Record]
) -> List[Record]:
    try:
        return [parse(row) for row in rows]
    except (KeyError, TypeError, ValueError) as e:
        raise SubgraphQueryError(f"Malformed subgraph record: {e}") from e


def fetch_all_scheduled_deposits(
    url: str,
    page_limit: int = PAGE_LIMIT,
    timeout: Union[int, float] = REQUEST_TIMEOUT,
) -> List[ScheduledDeposit]:
    """Fetch all deposits with a positive scheduled amount."""
    rows = fetch_all_pages(url, DEPOSITS, DEPOSITS_QUERY, page_limit, timeout)
    return _parse_records(rows, ScheduledDeposit.from_subgraph)


def fetch_all_scheduled_withdrawals(
    url: str,
    page_limit: int = PAGE_LIMIT,
    timeout: Union[int, float] = REQUEST_TIMEOUT,
) -> List[ScheduledWithdrawal]:
    """Fetch all withdrawals flagged as scheduled."""
    rows = fetch_all_pages(url, WITHDRAWALS, WITHDRAWALS_QUERY, page_limit, timeout)
    return _parse_records(rows, ScheduledWithdrawal.from_subgraph)
