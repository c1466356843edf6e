"""Fetch patient records from the KSense assessment API, score them, and submit the results."""

__version__ = "0.1.0"
