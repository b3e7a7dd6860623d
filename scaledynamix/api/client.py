"""
Scale Dynamix API Client - Main facade for all API operations.

This module holds the session lifecycle (login/logout), the client-side
caches and one method per remote operation, delegating the requests to
the domain-specific modules.
"""

import logging
import threading
from typing import Optional, Dict, Any, List, Union

from ..config import ScaleDynamixConfig
from ..constants import SiteType
from ..exceptions import AuthenticationError, LoginFailedError, ValidationError
from ..site import Site, SITE_FACTORY_KEY
from ..utils import is_valid_id
from ._http import HTTPClient
from .providers import ProvidersAPI
from .sites import SitesAPI
from .tags import TagsAPI
from .domains import DomainsAPI

logger = logging.getLogger(__name__)


class ScaleDynamixClient:
    """
    Client for the Scale Dynamix hosting API.

    Provides both:
    - Domain-specific sub-clients (client.sites, client.tags, ...) returning raw data
    - Flat methods (client.get_sites(), client.add_tag(), ...) returning Site objects

    The sites list is fetched once and kept until a create, clone or
    delete through this client flushes it. Changes made outside this
    client are not noticed until then.

    Usage:
        with ScaleDynamixClient() as client:
            client.login("my-api-key")
            site = client.create_site("my-site", stack_id=3, site_type=SiteType.WORDPRESS)
            site.add_domain("www.example.com")
    """

    def __init__(self, config: Optional[ScaleDynamixConfig] = None):
        """
        Initialize the API client.

        Args:
            config: Optional configuration. Uses defaults if not provided.
        """
        self._http = HTTPClient(config)
        self._lock = threading.RLock()
        self._cache: Dict[str, List[Any]] = {"stacks": [], "sites": []}

        self.providers = ProvidersAPI(self._http)
        self.sites = SitesAPI(self._http)
        self.tags = TagsAPI(self._http)
        self.domains = DomainsAPI(self._http)

    @property
    def config(self) -> ScaleDynamixConfig:
        """Get the configuration."""
        return self._http.config

    @property
    def is_authenticated(self) -> bool:
        """Whether login() has succeeded and logout() has not been called since."""
        return self._http.is_open

    # ========== Session ==========

    def login(self, api_key: str) -> None:
        """
        Open a session with an API key.

        The API has no login endpoint, so the key is verified by listing
        the providers. Calling login() while already logged in does nothing.

        Args:
            api_key: Scale Dynamix API key

        Raises:
            LoginFailedError: If the API rejects the key
        """
        with self._lock:
            if self._http.is_open:
                return
            if not isinstance(api_key, str) or not api_key:
                raise ValidationError("The Scale Dynamix API requires an API key")

            self._http.open(api_key)
            try:
                self._http.request("GET", "providers")
            except AuthenticationError:
                self._http.close()
                raise LoginFailedError("API login failed")
            except Exception:
                self._http.close()
                raise

            logger.info(f"Logged in to {self.config.api_uri}")

    def logout(self) -> None:
        """Close the session and clear the API key and all caches."""
        with self._lock:
            self._http.close()
            self._cache = {"stacks": [], "sites": []}
            logger.info("Logged out")

    def set_api_uri(self, uri: str) -> None:
        """Change the API endpoint. Logs out if a session is open."""
        with self._lock:
            self.config.api_uri = uri
            if self._http.is_open:
                self.logout()

    def set_api_version(self, version: str) -> None:
        """Change the API version. Logs out if a session is open."""
        with self._lock:
            self.config.api_version = version
            if self._http.is_open:
                self.logout()

    def _flush_sites(self) -> None:
        with self._lock:
            self._cache["sites"] = []
        logger.info("Flushed sites cache")

    def _make_site(self, values: Dict[str, Any]) -> Site:
        return Site(self, values, _key=SITE_FACTORY_KEY)

    # ========== Providers & Stacks ==========

    def get_providers(self) -> List[str]:
        """Get the names of the available cloud providers."""
        return self.providers.list_providers()

    def get_stacks(self) -> List[Any]:
        """Get the stacks on this account (stack objects are not supported yet)."""
        with self._lock:
            self._http.ensure_open()
            if self._cache["stacks"]:
                return list(self._cache["stacks"])
            self._cache["stacks"] = self.providers.list_stacks()
            return list(self._cache["stacks"])

    # ========== Sites ==========

    def get_sites(self) -> List[Site]:
        """
        Get all sites on the account.

        The list is fetched on first use and then served from the cache.
        """
        with self._lock:
            self._http.ensure_open()
            if not self._cache["sites"]:
                self._cache["sites"] = [
                    self._make_site(values) for values in self.sites.list()
                ]
            return list(self._cache["sites"])

    def get_site(self, site_id: Union[int, str]) -> Optional[Site]:
        """Find a site by ID among get_sites(); None if there is no such site."""
        self._http.ensure_open()
        if not is_valid_id(site_id):
            raise ValidationError(f"This does not look like a valid site ID: {site_id}")
        for site in self.get_sites():
            if str(site.id) == str(site_id):
                return site
        return None

    def get_site_metadata(self, site_id: Union[int, str]) -> Any:
        """Get the raw metadata of a site."""
        return self.sites.get_metadata(site_id)

    def create_site(
        self,
        name: str,
        stack_id: Union[int, str],
        site_type: Union[SiteType, int],
    ) -> Site:
        """
        Create a new site.

        Args:
            name: Site name (letters, digits and single hyphens)
            stack_id: Stack that will host the site
            site_type: CMS type, e.g. SiteType.WORDPRESS

        Returns:
            The new Site
        """
        values = self.sites.create(name, stack_id, site_type)
        self._flush_sites()
        return self._make_site(values)

    def clone_site(
        self,
        name: str,
        stack_id: Union[int, str],
        source_id: Union[int, str],
    ) -> Site:
        """Copy site ``source_id`` to a new site called ``name`` on ``stack_id``."""
        values = self.sites.clone(name, stack_id, source_id)
        self._flush_sites()
        return self._make_site(values)

    def delete_site(self, site_id: Union[int, str]) -> bool:
        """Delete a site. Returns the server's success flag."""
        success = self.sites.delete(site_id)
        if success:
            self._flush_sites()
        return success

    # ========== Tags ==========

    def get_tags(self, site_id: Union[int, str]) -> Dict[str, Any]:
        """Get a site's tags as ``{name: id}``."""
        return self.tags.list(site_id)

    def add_tag(self, site_id: Union[int, str], tag: str) -> Dict[str, Any]:
        """Add a tag to a site and return the updated ``{name: id}`` mapping."""
        return self.tags.add(site_id, tag)

    def delete_tag(self, site_id: Union[int, str], tag_id: Union[int, str]) -> bool:
        """Remove a tag from a site. Returns the server's success flag."""
        return self.tags.delete(site_id, tag_id)

    # ========== Domains ==========

    def get_domains(self, site_id: Union[int, str]) -> List[Dict[str, Any]]:
        """Get the domain records of a site."""
        return self.domains.list(site_id)

    def add_domain(self, site_id: Union[int, str], hostname: str) -> Any:
        """Attach a hostname to a site and return the new domain ID."""
        return self.domains.add(site_id, hostname)

    def set_primary_domain(self, site_id: Union[int, str], domain_id: Union[int, str]) -> bool:
        """Make a domain the primary domain of its site. Returns the server's success flag."""
        return self.domains.set_primary(site_id, domain_id)

    def delete_domain(self, site_id: Union[int, str], domain_id: Union[int, str]) -> bool:
        """Detach a domain from a site. Returns the server's success flag."""
        return self.domains.delete(site_id, domain_id)

    # ========== Context Manager ==========

    def close(self) -> None:
        """Close the client session."""
        self.logout()

    def __enter__(self) -> "ScaleDynamixClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def get_client(config: Optional[ScaleDynamixConfig] = None) -> ScaleDynamixClient:
    """
    Get an API client instance.

    Args:
        config: Optional configuration

    Returns:
        ScaleDynamixClient instance
    """
    return ScaleDynamixClient(config)
