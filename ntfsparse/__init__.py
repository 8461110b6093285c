"""Read-only parsing of NTFS on-disk structures: records, index nodes, strings and timestamps."""

__version__ = "0.1.0"