"""Two-player board games with a shared board interface and generic bots."""

__version__ = "0.1.0"