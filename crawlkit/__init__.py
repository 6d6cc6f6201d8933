"""Callback-driven web scraping toolkit."""

__version__ = "0.1.0"