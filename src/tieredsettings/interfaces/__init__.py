"""Interfaces to tieredsettings outside the Python API."""
