"""Portable utility types: strings, lists, date/time, variants, formatting, output streams and synchronisation."""

__version__ = "2.1.1"
__all__ = ["strings", "lists", "datetimes", "variant", "formatting", "streams", "sync"]