"""
Tags API - Site tag management.
"""

from typing import Any, Dict, Union

from ._http import HTTPClient
from ..exceptions import ValidationError
from ..utils import is_valid_id, normalize_tags, success_flag


class TagsAPI:
    """
    API for site tags.

    Tags are returned as ``{name: id}`` mappings.
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Tags API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def _check_site_id(self, site_id: Union[int, str], action: str) -> None:
        self._http.ensure_open()
        if not is_valid_id(site_id):
            raise ValidationError(f"Can't {action} for this site ID: {site_id}")

    def list(self, site_id: Union[int, str]) -> Dict[str, Any]:
        """Get a site's tags."""
        self._check_site_id(site_id, "retrieve tags")
        result = self._http.request("GET", f"tags/{site_id}")
        return self._tags_from(result, site_id)

    def add(self, site_id: Union[int, str], tag: str) -> Dict[str, Any]:
        """
        Add a tag to a site.

        Args:
            site_id: Site ID
            tag: Tag name

        Returns:
            The site's complete, updated tag mapping
        """
        self._check_site_id(site_id, "add a tag")
        if not isinstance(tag, str) or not tag.strip():
            raise ValidationError(f"Can't add an empty tag to site {site_id}")

        result = self._http.request("POST", f"tags/{site_id}", params={"tag": tag})
        return self._tags_from(result, site_id)

    def delete(self, site_id: Union[int, str], tag_id: Union[int, str]) -> bool:
        """
        Remove a tag from a site.

        Returns:
            The success flag reported by the server
        """
        self._check_site_id(site_id, "delete a tag")
        if not is_valid_id(tag_id):
            raise ValidationError(f"This does not look like a valid tag ID: {tag_id}")

        result = self._http.request("DELETE", f"tags/{site_id}", params={"tag_id": tag_id})
        return success_flag(result)

    @staticmethod
    def _tags_from(result: Any, site_id: Union[int, str]) -> Dict[str, Any]:
        tags = result.get("tags") if isinstance(result, dict) else None
        return normalize_tags(tags, f"the tags response for site {site_id}")
