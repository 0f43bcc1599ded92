"""
SDK for Content Budget.

Provides provider clients that record their spend in a BudgetStore.
"""

from .openrouter_client import CopyResult, GuardedOpenRouter, ImageResult

__all__ = ["CopyResult", "GuardedOpenRouter", "ImageResult"]
