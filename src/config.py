"""
Pact Configuration
==================
Settings for the repository and the Pact Broker client.

Values come from the environment (a ``.env`` file is loaded first) and,
optionally, from a YAML file. Environment variables win over the file.

Environment variables:
    PACTFLOW_BASE_URL     Pact Broker / Pactflow base URL
    PACTFLOW_TOKEN        Bearer token for the broker
    API_TIMEOUT_SECONDS   HTTP timeout for broker calls (default 30)
    PACT_REQUIRE_TESTS    "false" to accept untested states (default true)
    PACT_OUTPUT_DIR       Directory pact files are written to (default "pacts")

YAML file keys mirror the variables in lower case:
    broker_url: https://example.pactflow.io
    broker_token: ...
    timeout: 30
    require_tests: true
    output_dir: pacts
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in ("0", "false", "no", "off", "")


@dataclass
class PactConfig:
    """Configuration for building and publishing pacts."""
    broker_url: str = ""
    broker_token: Optional[str] = None
    timeout: int = 30
    require_tests: bool = True
    output_dir: str = "pacts"

    @classmethod
    def from_env(cls) -> "PactConfig":
        """Create config from environment variables."""
        return cls(
            broker_url=os.getenv("PACTFLOW_BASE_URL", "").rstrip("/"),
            broker_token=os.getenv("PACTFLOW_TOKEN"),
            timeout=int(os.getenv("API_TIMEOUT_SECONDS", "30")),
            require_tests=_as_bool(os.getenv("PACT_REQUIRE_TESTS", "true")),
            output_dir=os.getenv("PACT_OUTPUT_DIR", "pacts"),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "PactConfig":
        """
        Load config from a YAML file, then apply environment overrides.

        Args:
            config_path: Path to the YAML file

        Returns:
            PactConfig with file values overridden by any set env vars
        """
        with open(Path(config_path), "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        config = cls(
            broker_url=str(data.get("broker_url", "")).rstrip("/"),
            broker_token=data.get("broker_token"),
            timeout=int(data.get("timeout", 30)),
            require_tests=_as_bool(data.get("require_tests", True)),
            output_dir=str(data.get("output_dir", "pacts")),
        )

        if url := os.getenv("PACTFLOW_BASE_URL"):
            config.broker_url = url.rstrip("/")
        if token := os.getenv("PACTFLOW_TOKEN"):
            config.broker_token = token
        if timeout := os.getenv("API_TIMEOUT_SECONDS"):
            config.timeout = int(timeout)
        if require := os.getenv("PACT_REQUIRE_TESTS"):
            config.require_tests = _as_bool(require)
        if output_dir := os.getenv("PACT_OUTPUT_DIR"):
            config.output_dir = output_dir

        return config
