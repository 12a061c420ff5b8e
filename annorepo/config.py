"""Client configuration.

A ``ClientConfig`` names the service and the container a client talks to,
plus the few transport settings the clients expose. It is immutable, so the
clients and any iterators they hand out can share one instance freely.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version
from typing import Mapping, Optional

from ._core._request import about_url, service_url
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DISTRIBUTION_NAME = "annorepo-client"

try:
    __version__ = version(DISTRIBUTION_NAME)
except PackageNotFoundError:
    __version__ = "0.0.0"

USER_AGENT = f"{DISTRIBUTION_NAME}/{__version__}"

DEFAULT_TIMEOUT = 30.0

ENV_BASE_URL = "ANNOREPO_BASE_URL"
ENV_CONTAINER = "ANNOREPO_CONTAINER"
ENV_TIMEOUT = "ANNOREPO_TIMEOUT"
ENV_API_KEY = "ANNOREPO_API_KEY"


@dataclass(frozen=True)
class ClientConfig:
    """Immutable settings for a repository client.

    Attributes:
        base_url: Root URL of the AnnoRepo server, used verbatim.
        container: Name of the annotation container, used verbatim.
        timeout: Seconds to wait for each request, ``None`` to wait forever.
        user_agent: Value of the ``User-Agent`` header sent with every request.
        api_key: Reserved for authenticated servers. Stored but never sent.
    """

    base_url: str
    container: str
    timeout: Optional[float] = DEFAULT_TIMEOUT
    user_agent: str = USER_AGENT
    api_key: Optional[str] = None

    def __post_init__(self) -> None:
        if self.api_key is not None:
            logger.warning(
                "API key authentication is not supported yet; requests to %s "
                "are sent without credentials",
                self.base_url,
            )

    @classmethod
    def from_environ(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "ClientConfig":
        """Build a configuration from ``ANNOREPO_*`` environment variables.

        Parameters:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            ConfigurationError: if ``ANNOREPO_BASE_URL`` or ``ANNOREPO_CONTAINER``
                is unset, or ``ANNOREPO_TIMEOUT`` is not a number.
        """
        env = os.environ if environ is None else environ
        missing = [name for name in (ENV_BASE_URL, ENV_CONTAINER) if not env.get(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        timeout: Optional[float] = DEFAULT_TIMEOUT
        if raw_timeout := env.get(ENV_TIMEOUT):
            try:
                timeout = float(raw_timeout)
            except ValueError as ex:
                raise ConfigurationError(
                    f"{ENV_TIMEOUT} must be a number of seconds, got {raw_timeout!r}"
                ) from ex

        return cls(
            base_url=env[ENV_BASE_URL],
            container=env[ENV_CONTAINER],
            timeout=timeout,
            api_key=env.get(ENV_API_KEY) or None,
        )

    def about_url(self) -> str:
        return about_url(self.base_url)

    def service_url(self, endpoint: str, param: Optional[str] = None) -> str:
        """Resolve an endpoint of this config's container."""
        return service_url(self.base_url, self.container, endpoint, param)

    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent}
