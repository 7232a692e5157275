"""Parser for the Catalog chunk of macOS Unified Log tracev3 files."""

__version__ = "0.1.0"
__all__ = ["catalog", "records"]