"""One-time startup of a Lambda execution environment.

bootstrap() runs during the Lambda init phase, before the first event is
delivered. Any exception it raises aborts the init phase, so an
execution environment either serves with a fully connected Runtime or
never serves at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from app.config import Settings
from app.config import resolve_settings
from app.db.engine import PersistenceClient
from app.db.engine import connect
from app.db.migrations import run_migrations
from app.services.invocation_counter import InvocationCounter
from app.utils.logging import configure_logging
from app.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Runtime:
    """Process-wide state shared by every invocation of one environment."""

    settings: Settings
    client: PersistenceClient
    counter: InvocationCounter


def bootstrap(settings: Optional[Settings] = None) -> Runtime:
    """Resolve settings, connect to the database and start a fresh counter.

    Args:
        settings: Pre-resolved settings; read from the environment if None.

    Returns:
        The Runtime for this process instance.

    Raises:
        ConfigurationError: If required configuration is missing.
        DatabaseConnectionError: If the database cannot be reached.
    """
    settings = settings or resolve_settings()
    configure_logging(settings.log_level)

    client = connect(settings)
    if settings.auto_migrate:
        run_migrations(settings.database_url)

    logger.info(f"Lambda initiated to use database: '{client.redacted_url}'")
    return Runtime(settings=settings, client=client, counter=InvocationCounter())
