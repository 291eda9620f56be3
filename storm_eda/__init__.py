"""Exploratory analysis of historical tropical storm tracks."""

__version__ = "0.1.0"
