"""
Adapters layer - External integrations (Microsoft Graph API, clipboard).
"""

from .clipboard import copy_to_clipboard
from .graph_authenticator import GraphAuthenticator, TokenCacheStore
from .graph_client import GraphClient
from .mock_graph_client import MockGraphClient

__all__ = ["GraphClient", "GraphAuthenticator", "MockGraphClient", "TokenCacheStore", "copy_to_clipboard"]
