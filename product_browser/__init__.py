"""Product Browser: three ways of browsing a large product table."""

__version__ = "0.1.0"
