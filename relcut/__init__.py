"""relcut: release metadata consistency and release cutting."""

__version__ = "0.1.0"
