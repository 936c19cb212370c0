"""Split-view alignment engine."""

from hunkpick.align.engine import align, align_file

__all__ = ["align", "align_file"]
