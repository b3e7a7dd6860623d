"""
Configuration for the Scale Dynamix API client.

All settings are passed programmatically; nothing is read from the
environment or from disk.
"""

from dataclasses import dataclass

DEFAULT_API_URI = "https://api.scaledynamix.com/"
DEFAULT_API_VERSION = "v1"
DEFAULT_TIMEOUT = 30


@dataclass
class ScaleDynamixConfig:
    """Connection settings for a ScaleDynamixClient."""
    api_uri: str = DEFAULT_API_URI
    api_version: str = DEFAULT_API_VERSION
    timeout: int = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    max_retries: int = 0  # 0 disables retries

    def api_url(self, path: str) -> str:
        """Build the full URL for an API path, e.g. ``sites/42``."""
        return "{}/{}/{}".format(
            self.api_uri.rstrip("/"),
            self.api_version.strip("/"),
            path.lstrip("/"),
        )
