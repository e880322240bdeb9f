"""Interactive console assistant that runs local tools on the model's request."""

__version__ = "0.1.0"
