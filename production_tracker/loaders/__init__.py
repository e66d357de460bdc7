"""Data ingestion loaders for daily production entries."""

from .entries import load_daily_entries, merge_entries

__all__ = [
    "load_daily_entries",
    "merge_entries",
]
