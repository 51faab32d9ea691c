"""Utility functions and helpers"""

from jobpilot.utils.dates import parse_profile_date

__all__ = ["parse_profile_date"]
