"""Watch a betting feed for new posts by one tipster and send alerts."""

__version__ = "0.1.0"
