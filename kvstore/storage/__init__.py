"""Flat-file persistence for the JSON backend."""

from .cache import CacheStore
from .files import flush, load, validate_and_prepare

__all__ = ["CacheStore", "flush", "load", "validate_and_prepare"]
