"""
Sites API - Site listing, creation, cloning and deletion.
"""

import logging
from typing import Any, Dict, List, Union

from ._http import HTTPClient
from ..constants import SiteType
from ..exceptions import MalformedResponseError, ValidationError
from ..utils import (
    first_record,
    is_valid_id,
    is_valid_site_name,
    require_list,
    success_flag,
)

logger = logging.getLogger(__name__)

SITE_NAME_RULES = (
    'Site names can only contain A-Z, 0-9, and "-", '
    'and cannot start or end with a "-"'
)


class SitesAPI:
    """
    API for site operations.

    Returns raw site attributes; ScaleDynamixClient wraps them into Site
    objects and maintains the sites cache.
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Sites API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def list(self) -> List[Dict[str, Any]]:
        """Get the raw attributes of every site on the account."""
        self._http.ensure_open()
        result = self._http.request("GET", "sites")
        return require_list(result, "sites", "retrieving sites")

    def get_metadata(self, site_id: Union[int, str]) -> Any:
        """
        Get a site's metadata, including its tags and domains.

        Args:
            site_id: Site ID

        Returns:
            The raw ``result`` of ``GET sites/{id}``
        """
        self._http.ensure_open()
        if not is_valid_id(site_id):
            raise ValidationError(f"Can't retrieve metadata for this site ID: {site_id}")

        result = self._http.request("GET", f"sites/{site_id}")
        if not isinstance(result, (list, dict)):
            raise MalformedResponseError(
                f"Invalid API response when retrieving metadata for site {site_id}",
                response_data=result
            )
        return result

    def create(
        self,
        name: str,
        stack_id: Union[int, str],
        site_type: Union[SiteType, int],
    ) -> Dict[str, Any]:
        """
        Create a new site.

        Args:
            name: Site name (letters, digits and single hyphens)
            stack_id: Stack that will host the site
            site_type: CMS type; SiteType.CLONE is not allowed here

        Returns:
            Raw attributes of the new site
        """
        self._http.ensure_open()
        try:
            site_type = SiteType(site_type)
        except ValueError:
            raise ValidationError(f"Unknown site type: {site_type}")
        if site_type is SiteType.CLONE:
            raise ValidationError("Use clone_site() to copy a site, not create_site()")
        if not is_valid_site_name(name):
            raise ValidationError(SITE_NAME_RULES, details=repr(name))

        result = self._http.request("POST", "sites", params={
            "name": name,
            "stack_id": stack_id,
            "type": int(site_type),
            "source_id": 0,
        })
        logger.info(f"Created site {name!r} on stack {stack_id}")
        return first_record(result, f'creating "{name}"')

    def clone(
        self,
        name: str,
        stack_id: Union[int, str],
        source_id: Union[int, str],
    ) -> Dict[str, Any]:
        """
        Clone an existing site.

        Args:
            name: Name of the copy
            stack_id: Stack that will host the copy
            source_id: ID of the site to copy

        Returns:
            Raw attributes of the new site
        """
        self._http.ensure_open()
        if not is_valid_id(source_id):
            raise ValidationError(f"Can't clone this site ID: {source_id}")
        if not is_valid_site_name(name):
            raise ValidationError(SITE_NAME_RULES, details=repr(name))

        result = self._http.request("POST", "sites", params={
            "name": name,
            "stack_id": stack_id,
            "type": int(SiteType.CLONE),
            "clonesourceid": source_id,
        })
        logger.info(f"Cloned site {source_id} as {name!r} on stack {stack_id}")
        return first_record(result, f"cloning site {source_id}")

    def delete(self, site_id: Union[int, str]) -> bool:
        """
        Delete a site.

        Returns:
            The success flag reported by the server
        """
        self._http.ensure_open()
        if not is_valid_id(site_id):
            raise ValidationError(f"Can't delete this site ID: {site_id}")

        result = self._http.request("DELETE", f"sites/{site_id}")
        return success_flag(result)
