"""
Domains API - Hostnames attached to a site.
"""

from typing import Any, Dict, List, Union

from ._http import HTTPClient
from ..exceptions import MalformedResponseError, ValidationError
from ..utils import (
    is_valid_hostname,
    is_valid_id,
    require_dict,
    require_list,
    success_flag,
)


class DomainsAPI:
    """
    API for site domains.

    Handles:
    - Listing and adding hostnames
    - Choosing the primary domain
    - Removing hostnames
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Domains API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def _check_ids(self, site_id: Union[int, str], domain_id: Union[int, str, None] = None) -> None:
        self._http.ensure_open()
        if not is_valid_id(site_id):
            raise ValidationError(f"This does not look like a valid site ID: {site_id}")
        if domain_id is not None and not is_valid_id(domain_id):
            raise ValidationError(f"This does not look like a valid domain ID: {domain_id}")

    def list(self, site_id: Union[int, str]) -> List[Dict[str, Any]]:
        """Get the domain records of a site."""
        self._check_ids(site_id)
        result = self._http.request("GET", f"domains/{site_id}")
        return require_list(result, "domains", f"getting domains for site {site_id}")

    def add(self, site_id: Union[int, str], hostname: str) -> Any:
        """
        Attach a hostname to a site.

        Args:
            site_id: Site ID
            hostname: Hostname such as ``www.example.com``

        Returns:
            ID of the new domain record
        """
        self._check_ids(site_id)
        if not is_valid_hostname(hostname):
            raise ValidationError(f"Can't add this domain: {hostname}")

        result = self._http.request("POST", f"domains/{site_id}", params={"domain": hostname})
        if not isinstance(result, dict) or "id" not in result:
            raise MalformedResponseError(
                f'Invalid API response when adding the domain "{hostname}" for site {site_id}',
                response_data=result
            )
        return result["id"]

    def set_primary(self, site_id: Union[int, str], domain_id: Union[int, str]) -> bool:
        """
        Make a domain the site's primary domain.

        Returns:
            The success flag reported by the server
        """
        self._check_ids(site_id, domain_id)
        result = self._http.request("PUT", f"domains/{site_id}", params={"domain_id": domain_id})
        require_dict(result, f"setting the primary domain for site {site_id}")
        return success_flag(result)

    def delete(self, site_id: Union[int, str], domain_id: Union[int, str]) -> bool:
        """
        Detach a domain from a site. The API refuses to delete the primary domain.

        Returns:
            The success flag reported by the server
        """
        self._check_ids(site_id, domain_id)
        result = self._http.request("DELETE", f"domains/{site_id}", params={"domain_id": domain_id})
        require_dict(result, f"deleting a domain from site {site_id}")
        return success_flag(result)
