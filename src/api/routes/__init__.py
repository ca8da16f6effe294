"""
API routes and endpoints.
"""

from . import gmail, health

__all__ = ["gmail", "health"]
