#!/usr/bin/env python3
"""
CLI script for dry-running the Opium deposits scheduler keeper.

It only evaluates scheduled actions and prints the decision; nothing is
ever submitted on chain.
"""

import argparse
import json
import logging
import sys
import time
from datetime import datetime
from typing import Any, Dict

# Add the project root to the Python path
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from packages.opium.customs.deposits_scheduler.deposits_scheduler import (
    DepositsScheduler,
    get_web3_connection,
)
from packages.opium.customs.deposits_scheduler.models import (
    BATCH_SIZE,
    MAX_WORKERS,
    PAGE_LIMIT,
    SUBGRAPH_BASE_URL,
    Params,
)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        verbose: Whether to show debug logs

    Returns:
        Configured logger instance
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    logger = logging.getLogger("deposits_scheduler_runner")
    logger.setLevel(log_level)

    return logger


def parse_arguments() -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Dry-run the Opium scheduled deposits and withdrawals keeper"
    )

    # Required arguments
    parser.add_argument(
        "--rpc-url",
        required=True,
        help="JSON-RPC endpoint of the chain"
    )
    parser.add_argument(
        "--scheduler-address",
        required=True,
        help="Scheduler contract address"
    )
    parser.add_argument(
        "--subgraph-name",
        required=True,
        help="Subgraph name, appended to the subgraph base url"
    )

    # Optional arguments
    parser.add_argument(
        "--scheduler-type",
        default="deposit",
        help="'deposit' for deposits, anything else for withdrawals (default: deposit)"
    )
    parser.add_argument(
        "--block-time",
        type=int,
        help="Block timestamp to evaluate at (default: latest block)"
    )
    parser.add_argument(
        "--subgraph-base-url",
        default=SUBGRAPH_BASE_URL,
        help=f"Subgraph base url (default: {SUBGRAPH_BASE_URL})"
    )
    parser.add_argument(
        "--page-limit",
        type=int,
        default=PAGE_LIMIT,
        help=f"Records per subgraph page (default: {PAGE_LIMIT})"
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=BATCH_SIZE,
        help=f"Maximum executions per decision (default: {BATCH_SIZE})"
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=MAX_WORKERS,
        help=f"Candidates checked concurrently (default: {MAX_WORKERS})"
    )
    parser.add_argument(
        "--output",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )
    parser.add_argument(
        "--output-file",
        help="Write output to file instead of stdout"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show verbose output"
    )
    parser.add_argument(
        "--repeat",
        type=int,
        default=1,
        help="Repeat the evaluation N times to test caching (default: 1)"
    )

    return parser.parse_args()


def format_decision(result: Dict[str, Any], verbose: bool = False) -> str:
    """Format a decision for the terminal."""
    lines = [
        f"Scheduler:   {result['scheduler_address']} ({result['scheduler_type']})",
        f"Block time:  {result['block_time']}",
        f"Can execute: {result['canExec']}",
    ]
    if result["canExec"]:
        call_data = result["callData"]
        if not verbose and len(call_data) > 74:
            call_data = f"{call_data[:74]}... ({(len(call_data) - 2) // 2} bytes)"
        lines.append(f"Call data:   {call_data}")
    if verbose:
        for name, stats in result["cache"].items():
            lines.append(
                f"Cache {name}: {stats['entries']} entries, "
                f"{stats['hits']} hits, {stats['misses']} misses"
            )
    return "\n".join(lines)


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_arguments()

    logger = setup_logging(args.verbose)
    logger.info("Starting deposits scheduler dry run")

    try:
        start_time = time.time()
        ledger_api = get_web3_connection(args.rpc_url)
        block_time = args.block_time
        if block_time is None:
            block_time = ledger_api.eth.get_block("latest")["timestamp"]
        logger.info(f"Evaluating {args.scheduler_type} scheduler {args.scheduler_address} at {block_time}")

        scheduler = DepositsScheduler(
            ledger_api,
            params=Params(
                subgraph_base_url=args.subgraph_base_url,
                page_limit=args.page_limit,
                batch_size=args.batch_size,
                max_workers=args.max_workers,
            ),
        )
        decision = scheduler.check(
            args.scheduler_type, args.scheduler_address, args.subgraph_name, block_time
        )

        # Run multiple times if requested (to test caching)
        if args.repeat > 1:
            logger.info(f"Repeating evaluation {args.repeat-1} more times to test caching")
            for i in range(1, args.repeat):
                repeat_start = time.time()
                scheduler.check(
                    args.scheduler_type, args.scheduler_address, args.subgraph_name, block_time
                )
                repeat_time = time.time() - repeat_start
                logger.info(f"Repeat {i} completed in {repeat_time:.6f} seconds")

        result = {
            "scheduler_address": args.scheduler_address,
            "scheduler_type": args.scheduler_type,
            "block_time": block_time,
            **decision.as_result(),
            "cache": scheduler.cache.stats(),
        }

        if args.output == "json":
            result["timestamp"] = datetime.now().isoformat()
            output = json.dumps(result, indent=2)
        else:
            output = format_decision(result, args.verbose)

        if args.output_file:
            with open(args.output_file, "w") as f:
                f.write(output)
            logger.info(f"Results written to {args.output_file}")
        else:
            print("\n" + output + "\n")

        total_time = time.time() - start_time
        logger.info(f"Evaluation completed in {total_time:.3f} seconds")
        return 0

    except Exception as e:
        logger.error(f"Error: {str(e)}", exc_info=args.verbose)
        return 1


if __name__ == "__main__":
    sys.exit(main())
