"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

from typing import Annotated

from fastapi import Depends

from flightstack.backend.core.config import (
    get_app_config,
    get_settings,
    get_upstream_base_url,
    require_server_api_key,
)
from flightstack.backend.services.upstream import UpstreamClient


def get_upstream_client() -> UpstreamClient:
    """
    Build the relay's upstream client from settings.

    The credential always comes from server settings (API_KEY), never
    from the incoming request.

    Raises:
        ConfigurationError: If API_KEY is not set
    """
    api_key = require_server_api_key()
    app_settings = get_app_config().application
    return UpstreamClient(
        base_url=get_upstream_base_url(use_https=get_settings().use_https),
        api_key=api_key,
        timeout=float(app_settings.timeouts.external_api),
        credential_param=app_settings.upstream.credential_param,
        source="web",
    )


Upstream = Annotated[UpstreamClient, Depends(get_upstream_client)]
