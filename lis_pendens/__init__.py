"""Lis Pendens lead resolution: filings to property addresses and contacts."""

__version__ = "0.1.0"
