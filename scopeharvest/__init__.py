"""Harvest bounty-eligible assets from bug bounty platform APIs."""

__version__ = "0.1.0"
