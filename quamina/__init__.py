"""Byte-driven automata for matching field values against exact, prefix and shell-style patterns."""

__version__ = "0.1.0"
__all__ = ["rebuilding", "segments_tree", "shell_style", "small_table", "value_matcher"]