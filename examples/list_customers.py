"""
Minimal script that uses the public API to list customers.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Iterable, Tuple

from oak_sdk import ConfigError, create_crowdsplit, create_oak_client, load_oak_config


def _override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _build_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List Oak customers using the SDK API")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing OAK_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument(
        "--environment",
        choices=("sandbox", "production"),
        help="Override OAK_ENVIRONMENT",
    )
    parser.add_argument("--limit", type=int, default=10, help="Page size (default: 10)")
    parser.add_argument("--offset", type=int, help="Number of customers to skip")
    parser.add_argument("--email", help="Only return customers with this email")
    parser.add_argument(
        "--max-retries",
        type=int,
        help="Override the number of retries after the first attempt",
    )
    return parser.parse_args()


async def run(args: argparse.Namespace) -> int:
    overrides = _build_overrides(args.set or ())
    try:
        config = load_oak_config(
            env_file=args.env_file,
            overrides=overrides,
            environment=args.environment,
            max_number_of_retries=args.max_retries,
        )
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    logging.info("Listing customers from %s (%s)", config.base_url, config.environment)

    async with create_oak_client(config=config) as client:
        crowdsplit = create_crowdsplit(client)
        result = await crowdsplit.customers.list(
            {"limit": args.limit, "offset": args.offset, "email": args.email}
        )

    if not result.ok:
        cause = result.error.cause
        logging.error("Listing customers failed: %s (%s)", result.error, cause)
        return 1

    print(json.dumps(result.value, indent=2))
    return 0


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
