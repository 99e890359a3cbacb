"""Republish: let readers republish articles under a Creative Commons license."""

__version__ = "1.6.0"
