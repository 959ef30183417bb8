"""devdashboard — cross-repository dependency version reports."""

__version__ = "0.1.0"
