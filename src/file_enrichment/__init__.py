"""Record enrichment from a periodically reloaded dictionary file."""

__version__ = "0.1.0"
