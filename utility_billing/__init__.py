"""Electricity and water billing for a housing colony."""

__version__ = "0.1.0"
