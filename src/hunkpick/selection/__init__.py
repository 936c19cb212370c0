"""Selection state and selection parsing."""

from hunkpick.selection.tokens import SelectionError, load_selection_file, parse_selection_tokens
from hunkpick.selection.state import LineSelection

__all__ = [
    "LineSelection",
    "SelectionError",
    "load_selection_file",
    "parse_selection_tokens",
]
