"""Starter .hunkpick.toml template."""

DEFAULT_TOML = """\
# hunkpick configuration
version = "1.0"

[view]
mode = "unified"          # unified | split
show_line_numbers = true

[diff]
context_lines = 3         # lines of context requested from git diff

[patch]
on_bad_header = "error"   # error | skip: handling of unreadable hunk headers

[output]
format = "terminal"       # terminal | json
"""
