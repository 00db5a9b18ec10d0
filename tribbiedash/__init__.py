"""A three-lane side-scrolling runner game with a pygame front end."""

__version__ = "0.1.0"
__all__ = ["__version__"]