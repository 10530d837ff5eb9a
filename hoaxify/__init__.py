"""hoaxify - user registration and email activation service."""

__version__ = "0.1.0"
