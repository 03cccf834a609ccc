"""Remote asset fetching."""

from .remote import RemoteAssetCache

__all__ = ["RemoteAssetCache"]
