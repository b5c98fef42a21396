"""
followsync

Keeps a Trakt user's "Following" list in sync with the shows they follow.
"""
from followsync.utils.logger import logger

__all__ = ["logger"]
