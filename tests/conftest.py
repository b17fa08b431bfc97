"""Root test configuration."""

import logging

import pytest
import structlog

PACT_ENV_VARS = (
    "PACT_VERIFIER_PUBLISH_RESULTS",
    "PACT_SHOW_STACKTRACE",
    "PACT_SHOW_FULL_DIFF",
    "PACT_PROVIDER_VERSION",
    "PACT_PROVIDER_VERSION_TRIM_SNAPSHOT",
    "PACT_FILTER_CONSUMERS",
    "PACT_FILTER_DESCRIPTION",
    "PACT_FILTER_PROVIDERSTATE",
    "PACT_BROKER_TIMEOUT",
    "PACT_BROKER_MAX_RETRIES",
)


def pytest_configure(config):
    """Quiet structlog output; warnings and errors still reach the console."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep PACT_* variables and any .env file out of VerifierSettings."""
    for name in PACT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
