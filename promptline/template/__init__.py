"""Format-string template engine.

Parses format strings such as ``via [$symbol($version )]($style)`` into a
tree of literals, variables, and conditional groups, then resolves the tree
into ``Segment`` values with lazily computed variables.
"""

from __future__ import annotations

from .nodes import Group, Literal, Meta, Segment, StyleRef, Template, TemplateNode, Variable
from .parser import escape_literal, parse_template
from .resolver import ResolutionStrategies, Strategy, VariableResolver, merge_segments, resolve, segments_text

__all__ = [
    "Literal",
    "Variable",
    "Meta",
    "Group",
    "StyleRef",
    "TemplateNode",
    "Template",
    "Segment",
    "parse_template",
    "escape_literal",
    "Strategy",
    "ResolutionStrategies",
    "VariableResolver",
    "merge_segments",
    "resolve",
    "segments_text",
]
