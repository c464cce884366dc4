"""
External HTTP integrations package.
"""

from .http_client import ChannelHTTPClient

__all__ = ["ChannelHTTPClient"]
