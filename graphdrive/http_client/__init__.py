"""Authenticated request pipeline."""

from .expiry import is_token_expired
from .graph_api import GraphAPI
from .token_store import TokenStore

__all__ = ["GraphAPI", "TokenStore", "is_token_expired"]
