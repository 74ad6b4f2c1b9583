"""
Pact Publisher
==============
Publishes pact files written by a test run to a Pact Broker.

Usage:
    # From command line:
    python -m src.publisher pacts/ 1.4.2

    # Against a specific broker, with a YAML config:
    python -m src.publisher pacts/ 1.4.2 --broker-url https://example.pactflow.io
    python -m src.publisher pacts/ 1.4.2 --config pact.yaml
"""

import asyncio
import sys
from typing import Optional

from src.config import PactConfig
from src.repository import PactBrokerHost, PactRepository


def publish_directory(
    pact_dir: str,
    version: str,
    config: Optional[PactConfig] = None,
    host=None
) -> int:
    """
    Load every pact in ``pact_dir`` and publish it.

    Returns:
        Number of pacts published
    """
    config = config or PactConfig.from_env()
    repository = PactRepository.from_config(config)
    repository.load_pact_files(pact_dir)

    if host is None:
        host = PactBrokerHost(config=config)

    asyncio.run(repository.publish(host, version))
    return len(repository.pacts)


# =============================================================================
# CLI RUNNER
# =============================================================================

def main() -> int:
    """Run the publisher from command line."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Publish pact files to a Pact Broker"
    )
    parser.add_argument("pact_dir", help="Directory containing pact JSON files")
    parser.add_argument("version", help="Consumer version the pacts are published for")
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--broker-url", help="Override broker URL (default: PACTFLOW_BASE_URL)")

    args = parser.parse_args()

    config = PactConfig.from_file(args.config) if args.config else PactConfig.from_env()
    if args.broker_url:
        config.broker_url = args.broker_url.rstrip("/")

    try:
        count = publish_directory(args.pact_dir, args.version, config=config)
    except Exception as e:
        print(f"[Publisher] ERROR: {e}")
        return 1

    print(f"[Publisher] Published {count} pact(s) as version {args.version}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
