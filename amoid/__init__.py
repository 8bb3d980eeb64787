"""Convert between add-on id formats (id, guid, slug, user id) via the AMO database."""

__version__ = "1.0.0"
