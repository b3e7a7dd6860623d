"""
Scale Dynamix API Client Package.

Structure:
    - client.py: ScaleDynamixClient facade (session, caches, Site objects)
    - _http.py: Base HTTP client with session, API key and envelope handling
    - providers.py: Providers and stacks
    - sites.py: Site listing, creation, cloning and deletion
    - tags.py: Site tags
    - domains.py: Site domains

Usage:
    from scaledynamix.api import ScaleDynamixClient

    client = ScaleDynamixClient()
    client.login("my-api-key")

    # Site objects with cached state
    sites = client.get_sites()

    # Raw data from the domain-specific modules
    domains = client.domains.list(sites[0].id)
"""

from .client import ScaleDynamixClient, get_client
from ._http import HTTPClient, TLSAdapter
from .providers import ProvidersAPI
from .sites import SitesAPI
from .tags import TagsAPI
from .domains import DomainsAPI

__all__ = [
    # Main client
    "ScaleDynamixClient",
    "get_client",
    # HTTP layer
    "HTTPClient",
    "TLSAdapter",
    # Domain APIs
    "ProvidersAPI",
    "SitesAPI",
    "TagsAPI",
    "DomainsAPI",
]
