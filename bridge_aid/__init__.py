"""Bridge Aid: match people to local social-service resources."""

__version__ = "0.1.0"
