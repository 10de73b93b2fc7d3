"""podnav: browse and jump through podcast episodes from the terminal."""

__version__ = "0.1.0"
