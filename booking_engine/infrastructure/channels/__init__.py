"""
Notification channel adapters.
"""

from .factory import create_channel_adapter
from .mock import MockChannel
from .router import ChannelRouter

__all__ = ["ChannelRouter", "MockChannel", "create_channel_adapter"]
