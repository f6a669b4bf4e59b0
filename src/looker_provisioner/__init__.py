"""Declarative provider plugin for the Looker API."""

__version__ = "0.1.0"
