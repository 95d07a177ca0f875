"""skillcatalog - keeps a skills directory, its plugin grouping and the
generated marketplace catalog consistent."""

__version__ = "0.3.0"
