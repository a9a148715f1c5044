"""Browser front panel for a remotely actuated power button."""

__version__ = "1.0.0"
