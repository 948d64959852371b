"""
Core utilities for AEOlytics.
"""
from aeolytics.core.security import create_access_token, decode_token

__all__ = [
    "create_access_token",
    "decode_token",
]
