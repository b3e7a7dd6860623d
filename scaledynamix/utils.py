"""
Utility functions for the Scale Dynamix API client.
"""

import re
from typing import Any, Dict, Optional

from .exceptions import MalformedResponseError

SITE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9]+(-[A-Za-z0-9]+)*$")
HOSTNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+$")
DIGITS_PATTERN = re.compile(r"^[0-9]+$")


def is_valid_id(value: Any) -> bool:
    """
    Check whether a value can be used as a site, domain or tag ID.

    Args:
        value: Positive integer, or a string of decimal digits

    Returns:
        True if the value identifies a remote resource
    """
    # bool is an int subclass; True must not pass as ID 1
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value > 0
    if isinstance(value, str):
        return DIGITS_PATTERN.match(value) is not None and int(value) > 0
    return False


def is_valid_site_name(name: Any) -> bool:
    """Check a site name: letters and digits, optionally joined by single hyphens."""
    return isinstance(name, str) and SITE_NAME_PATTERN.match(name) is not None


def is_valid_hostname(hostname: Any) -> bool:
    """Check that a hostname only contains letters, digits, '_', '.' and '-'."""
    return isinstance(hostname, str) and HOSTNAME_PATTERN.match(hostname) is not None


def normalize_tags(tags: Any, context: str = "tags") -> Dict[str, Any]:
    """
    Convert the API's tag structure into a ``{name: id}`` mapping.

    The API sends tags keyed by ID (``{"12": "staging"}``). Lists of
    ``{"id": ..., "tag": ...}`` records are accepted as well; anything
    else, including bare names without IDs, is a malformed response.

    Args:
        tags: Raw ``tags`` value from an API response
        context: Description used in error messages

    Returns:
        Mapping of tag name to tag ID
    """
    if isinstance(tags, dict):
        return {str(name): tag_id for tag_id, name in tags.items()}

    if not isinstance(tags, list):
        raise MalformedResponseError(
            f"Unexpected tag structure in {context}",
            response_data=tags
        )

    result: Dict[str, Any] = {}
    for item in tags:
        if not isinstance(item, dict):
            raise MalformedResponseError(
                f"Tag entry is not a record in {context}",
                response_data=item
            )
        name = item.get("tag", item.get("name"))
        if name is None or "id" not in item:
            raise MalformedResponseError(
                f"Tag record without a name or id in {context}",
                response_data=item
            )
        result[str(name)] = item["id"]
    return result


def first_record(result: Any, context: str) -> Dict[str, Any]:
    """
    Extract the single site record from a create/clone response.

    Args:
        result: The ``result`` member of the response envelope
        context: Description used in error messages

    Returns:
        The site's raw attributes
    """
    if isinstance(result, list) and result and isinstance(result[0], dict):
        return result[0]
    if isinstance(result, dict):
        if "id" in result:
            return result
        if "0" in result and isinstance(result["0"], dict):
            return result["0"]
    raise MalformedResponseError(
        f"Invalid API response when {context}",
        response_data=result
    )


def success_flag(result: Any, default: bool = True) -> bool:
    """Return the ``success`` member of a result object, or ``default`` if there is none."""
    if isinstance(result, dict) and "success" in result:
        return result["success"] is True
    return default


def require_dict(result: Any, context: str) -> Dict[str, Any]:
    """Ensure an API result is a JSON object."""
    if not isinstance(result, dict):
        raise MalformedResponseError(
            f"Invalid API response when {context}",
            response_data=result
        )
    return result


def require_list(result: Any, key: str, context: str) -> list:
    """
    Extract a list member from an API result.

    Args:
        result: The ``result`` member of the response envelope
        key: Member holding the list, e.g. ``"sites"``
        context: Description used in error messages
    """
    value: Optional[Any] = result.get(key) if isinstance(result, dict) else None
    if not isinstance(value, list):
        raise MalformedResponseError(
            f"Invalid API response when {context}",
            response_data=result
        )
    return value
