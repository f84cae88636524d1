"""fontshelf - index local font files and browse them by family."""

__version__ = "0.1.0"
