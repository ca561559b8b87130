"""Transaction categorization utilities.

Deterministic, local keyword matching over transaction descriptions. No
network calls, so it runs inline on every create/update request.
"""

from .rules import CATEGORIES, OTHER, classify

__all__ = ["CATEGORIES", "OTHER", "classify"]
