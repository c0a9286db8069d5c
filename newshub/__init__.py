"""News aggregator backend: accounts, cookie sessions, favorites and a news API proxy."""

__version__ = "0.1.0"
