"""hunkpick — stage selected lines of a diff through synthesized patches."""

__version__ = "0.1.0"
