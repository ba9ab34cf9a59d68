"""Loading of pipeline inputs other than feeds."""

from .manual import load_manual_entries, parse_manual_entry

__all__ = ["load_manual_entries", "parse_manual_entry"]
