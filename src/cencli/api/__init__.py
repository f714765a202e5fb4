"""Platform API request layer."""

from .client import CensysApi

__all__ = [
    "CensysApi",
]
