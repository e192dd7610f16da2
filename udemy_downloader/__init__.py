"""Download Udemy course curricula and lecture videos."""

__version__ = "0.3.0"
