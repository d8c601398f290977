"""Facility-layout canvas editor: zones drawn over a terminal floor plan."""

__version__ = "0.1.0"
