"""
Review Formatter

This module provides message formatting for Gerrit robot comments.
"""

from .gerrit import GerritCommentFormatter, gerrit_comment

__all__ = ['GerritCommentFormatter', 'gerrit_comment']
