"""Media library core: configuration, collection scanning, NFO metadata, search and item filtering."""

__version__ = "0.1.0"