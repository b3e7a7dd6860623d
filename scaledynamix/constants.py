"""
Constants shared by the API client and the Site wrapper.
"""

from enum import IntEnum


class SiteType(IntEnum):
    """CMS types accepted by the ``sites`` endpoint."""
    WORDPRESS = 1
    WP_MULTISITE_SUBDOMAINS = 2
    WP_MULTISITE_DIRECTORIES = 3
    WOOCOMMERCE = 4
    PHP_HTML = 5
    CLONE = 9
