"""chiefr - route code changes to the project members who own them."""

__version__ = "0.1.0"
