"""
Gerrit Integration Layer

This module provides Gerrit REST API integration for posting
robot comment reviews.
"""

from .client import GerritAPIError, GerritClient

__all__ = ['GerritAPIError', 'GerritClient']
