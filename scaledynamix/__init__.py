"""
Scale Dynamix API Client.

A Python client for the Scale Dynamix hosting API: providers, stacks,
sites, domains and tags.

Usage:
    from scaledynamix import ScaleDynamixClient

    with ScaleDynamixClient() as client:
        client.login("my-api-key")
        for site in client.get_sites():
            print(site.id, site.name, site.get_domains())
"""

import logging

__version__ = "1.0.0"
__prog_name__ = "scaledynamix"

from .api import ScaleDynamixClient, get_client  # noqa: E402
from .config import ScaleDynamixConfig  # noqa: E402
from .constants import SiteType  # noqa: E402
from .exceptions import (  # noqa: E402
    ErrorKind,
    ScaleDynamixError,
    NotAuthenticatedError,
    AuthenticationError,
    LoginFailedError,
    ValidationError,
    MalformedResponseError,
    APIError,
    UnimplementedError,
    SiteDeletedError,
)
from .site import Site  # noqa: E402

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "ScaleDynamixClient",
    "get_client",
    "ScaleDynamixConfig",
    "SiteType",
    "Site",
    "ErrorKind",
    "ScaleDynamixError",
    "NotAuthenticatedError",
    "AuthenticationError",
    "LoginFailedError",
    "ValidationError",
    "MalformedResponseError",
    "APIError",
    "UnimplementedError",
    "SiteDeletedError",
]
