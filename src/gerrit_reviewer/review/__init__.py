"""
Review Comment Pipeline

This module provides diff classification of diagnostics and the
batched robot comment aggregator.
"""

from .filter import DiffFilter
from .commenter import ChangeReviewCommenter

__all__ = ['DiffFilter', 'ChangeReviewCommenter']
