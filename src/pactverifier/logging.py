import logging
import sys
from typing import Any

import structlog

from pactverifier.pact.models import Interaction, Pact


def configure_logging(level: int | str = logging.INFO, *, json_output: bool | None = None) -> None:
    """
    Configure structlog on top of standard logging.

    JSON lines are written when stderr is not a terminal (CI, build tools);
    otherwise the console renderer is used. Pass ``json_output`` to force one.
    """

    if json_output is None:
        json_output = not sys.stderr.isatty()

    renderer: Any = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)


def bind_context(**kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Bind contextual fields (consumer, provider, ...) for downstream logs."""

    logger = structlog.get_logger()
    return logger.bind(**kwargs)


def interaction_context(pact: Pact, interaction: Interaction) -> dict[str, Any]:
    """Log fields identifying one interaction of a pact."""

    return {
        "consumer": pact.consumer.name,
        "provider": pact.provider.name,
        "description": interaction.description,
        "provider_states": [s.name for s in interaction.provider_states],
    }
