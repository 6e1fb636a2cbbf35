"""Property list node tree with binary plist reading and writing."""

__version__ = "0.1.0"

__all__ = [
    "base64codec",
    "binary_reader",
    "binary_writer",
    "containers",
    "tree",
    "values",
]