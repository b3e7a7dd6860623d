"""
Site - a hosted site on the Scale Dynamix platform.

A Site keeps a local copy of its metadata, tags and domains. A single
metadata request fills all three; later changes made through the Site
update the local copy so they don't need to be fetched again.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from .exceptions import (
    APIError,
    MalformedResponseError,
    SiteDeletedError,
    ValidationError,
)
from .utils import is_valid_id, normalize_tags

if TYPE_CHECKING:
    from .api.client import ScaleDynamixClient

logger = logging.getLogger(__name__)

SITE_FACTORY_KEY = object()


class Site:
    """
    A site on the Scale Dynamix platform.

    Site objects are created by ScaleDynamixClient (get_sites(),
    create_site(), clone_site()) and are read-only: their state changes only
    through the methods below, which call the API first and update the local
    copy afterwards. Once delete() succeeds, every further access raises
    SiteDeletedError.
    """

    def __init__(self, client: "ScaleDynamixClient", values: Dict[str, Any], _key: Any = None):
        if _key is not SITE_FACTORY_KEY:
            raise TypeError("Site objects can only be created by ScaleDynamixClient")
        if not isinstance(values, dict) or not is_valid_id(values.get("id")):
            raise MalformedResponseError(
                "The API returned a site without a valid id",
                response_data=values
            )

        attrs = dict(values)
        for key in ("metadata", "tags", "domains"):
            attrs.pop(key, None)

        object.__setattr__(self, "_client", client)
        object.__setattr__(self, "_values", attrs)
        object.__setattr__(self, "_metadata", {})
        object.__setattr__(self, "_metadata_loaded", False)
        object.__setattr__(self, "_tags", {})
        object.__setattr__(self, "_domains", {})
        object.__setattr__(self, "_deleted", False)

    def __setattr__(self, name: str, value: Any) -> None:
        if not name.startswith("_"):
            raise AttributeError(f"{type(self).__name__} is read-only")
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        state = " deleted" if self._deleted else ""
        return f"<Site id={self._values['id']!r} name={self._values.get('name')!r}{state}>"

    def _check_deleted(self) -> None:
        if self._deleted:
            raise SiteDeletedError(
                f"Site ID {self._values['id']} can not be accessed because it "
                "has been deleted from your account"
            )

    # ========== Stored fields ==========

    @property
    def deleted(self) -> bool:
        """Whether this site has been deleted."""
        return self._deleted

    @property
    def id(self) -> Union[int, str]:
        self._check_deleted()
        return self._values["id"]

    @property
    def name(self) -> Optional[str]:
        self._check_deleted()
        return self._values.get("name")

    def get(self, field: str, default: Any = None) -> Any:
        """
        Get a stored attribute of this site as returned by the sites list.

        Args:
            field: Attribute name, e.g. ``"name"`` or ``"stack_id"``
            default: Value returned when the attribute is absent
        """
        self._check_deleted()
        return self._values.get(field, default)

    # ========== Lazily fetched state ==========

    def _import_tags(self, tags: Any) -> None:
        self._tags = normalize_tags(tags, f"site ID {self._values['id']}")

    def _import_domains(self, domains: Any) -> None:
        site_id = self._values["id"]
        if not isinstance(domains, list):
            raise MalformedResponseError(
                f"Unexpected domain structure for site ID {site_id}",
                response_data=domains
            )
        for domain in domains:
            if not isinstance(domain, dict) or "domain" not in domain:
                raise MalformedResponseError(
                    f"Missing hostname in domain structure for site ID {site_id}",
                    response_data=domain
                )
            hostname = domain["domain"]
            if "id" not in domain:
                raise MalformedResponseError(
                    f'Missing id for hostname "{hostname}" in site ID {site_id}',
                    response_data=domain
                )
            record = {k: v for k, v in domain.items() if k != "domain"}
            self._domains[hostname] = record

    def _load_metadata(self) -> None:
        site_id = self._values["id"]
        response = self._client.get_site_metadata(site_id)
        if not isinstance(response, list) or len(response) != 1 or not isinstance(response[0], dict):
            raise MalformedResponseError(
                "The API returned an unexpected response when retrieving "
                f"metadata for site ID {site_id}",
                response_data=response
            )

        metadata = dict(response[0])
        tags = metadata.pop("tags", {})
        domains = metadata.pop("domains", [])
        self._import_tags(tags)
        self._import_domains(domains)
        self._metadata = metadata
        self._metadata_loaded = True
        logger.debug(f"Loaded metadata for site {site_id}")

    def get_metadata(self) -> Dict[str, Any]:
        """
        Get this site's metadata, fetching it on first use.

        Tags and domains are taken out of the metadata and cached
        separately; see get_tags() and get_domains().
        """
        self._check_deleted()
        if not self._metadata_loaded:
            self._load_metadata()
        return dict(self._metadata)

    def get_tags(self) -> Dict[str, Any]:
        """Get this site's tags as ``{name: id}``, fetching metadata on first use."""
        self._check_deleted()
        if not self._metadata_loaded:
            self._load_metadata()
        return dict(self._tags)

    def get_domains(self) -> Dict[str, Dict[str, Any]]:
        """
        Get this site's domains, fetching metadata on first use.

        Returns:
            Mapping of hostname to its record (``id``, ``primary``, ...)
        """
        self._check_deleted()
        if not self._metadata_loaded:
            self._load_metadata()
        return {hostname: dict(record) for hostname, record in self._domains.items()}

    def _primary_hostname(self) -> Optional[str]:
        for hostname, record in self._domains.items():
            if record.get("primary"):
                return hostname
        return None

    # ========== Tags ==========

    def add_tag(self, tag: str) -> None:
        """Add a tag. The local tags are replaced by the list the server returns."""
        self._check_deleted()
        self._tags = self._client.add_tag(self._values["id"], tag)

    def delete_tag(self, tag: str) -> None:
        """Remove a tag by name. Unknown tags are ignored."""
        tags = self.get_tags()
        if tag not in tags:
            return
        if self._client.delete_tag(self._values["id"], tags[tag]):
            self._tags.pop(tag, None)

    # ========== Domains ==========

    def add_domain(self, hostname: str) -> None:
        """Attach a hostname to this site."""
        self._check_deleted()
        domain_id = self._client.add_domain(self._values["id"], hostname)
        primary = bool(self._domains.get(hostname, {}).get("primary"))
        self._import_domains([{"domain": hostname, "id": domain_id, "primary": primary}])

    def set_primary_domain(self, hostname: str) -> None:
        """
        Make an attached hostname the primary domain.

        Does nothing if it is already primary.

        Raises:
            ValidationError: If the hostname is not attached to this site
            APIError: If the server did not accept the change
        """
        domains = self.get_domains()
        if hostname not in domains:
            raise ValidationError(
                f'Can\'t make "{hostname}" the primary domain for site ID '
                f"{self._values['id']} because this domain hasn't been added to this site"
            )
        if domains[hostname].get("primary"):
            return

        success = self._client.set_primary_domain(self._values["id"], domains[hostname]["id"])
        if not success:
            raise APIError(
                f'Scale Dynamix failed to set "{hostname}" as the primary domain '
                f"for site ID {self._values['id']}"
            )

        previous = self._primary_hostname()
        if previous is not None:
            self._domains[previous]["primary"] = False
        self._domains[hostname]["primary"] = True
        logger.info(f"Primary domain of site {self._values['id']} is now {hostname}")

    def delete_domain(self, hostname: str) -> None:
        """
        Detach a hostname from this site. Unknown hostnames are ignored.

        The API refuses to delete the primary domain, so another domain is
        made primary first.

        Raises:
            ValidationError: If the hostname is the primary and only domain
        """
        domains = self.get_domains()
        if hostname not in domains:
            return

        if domains[hostname].get("primary"):
            others = [name for name in domains if name != hostname]
            if not others:
                raise ValidationError(
                    f'Can\'t delete "{hostname}" from site ID {self._values["id"]}: '
                    "it is the primary domain and no other domain can replace it"
                )
            self.set_primary_domain(others[0])

        if self._client.delete_domain(self._values["id"], domains[hostname]["id"]):
            self._domains.pop(hostname, None)

    # ========== Site lifecycle ==========

    def clone(self, name: str, to_stack: Union[int, str]) -> "Site":
        """
        Copy this site.

        Args:
            name: Name of the copy
            to_stack: Stack that will host the copy

        Returns:
            The new Site
        """
        self._check_deleted()
        return self._client.clone_site(name, to_stack, self._values["id"])

    def delete(self) -> None:
        """Delete this site. The object stays usable if the server reports failure."""
        self._check_deleted()
        if self._client.delete_site(self._values["id"]):
            self._deleted = True
