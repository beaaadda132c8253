"""Process-wide logfire setup for the assistant."""

from __future__ import annotations

import os
from functools import lru_cache

import logfire

from . import __version__

SERVICE_NAME = "scrapedgit"


@lru_cache(maxsize=1)
def configure_logfire() -> None:
    """Configure logfire on first use; later calls are no-ops.

    Spans are exported only when ``LOGFIRE_TOKEN`` (or the older
    ``LOGFIRE_API_KEY``) is set, so local runs and tests stay offline.
    """

    logfire.configure(
        token=os.getenv("LOGFIRE_TOKEN") or os.getenv("LOGFIRE_API_KEY") or None,
        send_to_logfire="if-token-present",
        service_name=SERVICE_NAME,
        service_version=__version__,
        environment=os.getenv("SCRAPEDGIT_ENV") or None,
    )


__all__ = ["SERVICE_NAME", "configure_logfire"]
