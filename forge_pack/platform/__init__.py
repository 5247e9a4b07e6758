"""
Init module
"""

__all__ = ["Type"]

from .types import Type
