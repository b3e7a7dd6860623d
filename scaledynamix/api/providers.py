"""
Providers API - Cloud providers and stacks.
"""

from typing import Any, List

from ._http import HTTPClient
from ..exceptions import MalformedResponseError, UnimplementedError
from ..utils import require_list


class ProvidersAPI:
    """
    API for cloud providers and stacks.

    Stacks are only listed: this client has no Stack model yet, so any
    stack returned by the API raises UnimplementedError.
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Providers API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def list_providers(self) -> List[str]:
        """Get the names of the available cloud providers."""
        self._http.ensure_open()
        result = self._http.request("GET", "providers")
        if not isinstance(result, dict) or "providers" not in result:
            raise MalformedResponseError(
                "Invalid API response when retrieving providers",
                response_data=result
            )
        return result["providers"]

    def list_stacks(self) -> List[Any]:
        """
        Get the stacks on this account.

        Returns:
            An empty list when the account has no stacks
        """
        self._http.ensure_open()
        result = self._http.request("GET", "stacks")
        stacks = require_list(result, "stacks", "retrieving stacks")
        if stacks:
            # TODO: build Stack objects once the stacks payload is documented
            raise UnimplementedError(
                "This API client does not yet support stack objects"
            )
        return []
