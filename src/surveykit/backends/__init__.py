"""Backends for survey output generation (DOT diagrams)."""

from .dot_generator import DotMode, generate_dot, save_dot_file

__all__ = ["DotMode", "generate_dot", "save_dot_file"]
