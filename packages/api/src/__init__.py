# This project was developed with assistance from AI tools.
"""LeaseDesk API -- rental application lifecycle service."""

__version__ = "0.1.0"
