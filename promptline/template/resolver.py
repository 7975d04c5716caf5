"""Evaluate parsed templates into styled segments.

Variables are looked up through a closed set of strategies: computed values
first, then meta substitutions. A variable with nothing to show raises
``VariableAbsent`` which the nearest enclosing group catches, discarding the
group's buffered output. Hard failures surface as ``ResolutionError`` and
abort the whole template.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from ..errors import ResolutionError, VariableAbsent
from .nodes import Group, Literal, Meta, Segment, StyleRef, Template, TemplateNode, Variable

logger = logging.getLogger(__name__)

ValueFn = Callable[[], "str | None"]


class Strategy(enum.Enum):
    META = "meta"
    VALUE = "value"
    STYLE = "style"


# Lookup order for ``$name`` references that were not declared as meta.
VARIABLE_LOOKUP_ORDER = (Strategy.VALUE, Strategy.META)


@dataclass(frozen=True)
class ResolutionStrategies:
    """Caller-supplied lookups for one render pass.

    ``values`` maps a name to a zero-argument callable returning the text,
    ``None`` when there is legitimately nothing to show, or raising
    ``ResolutionError`` on hard failure. ``meta`` and ``styles`` are static
    name-to-string substitutions.
    """

    meta: Mapping[str, str] = field(default_factory=dict)
    values: Mapping[str, ValueFn] = field(default_factory=dict)
    styles: Mapping[str, str] = field(default_factory=dict)


def merge_segments(segments: Iterable[Segment]) -> list[Segment]:
    """Drop empty segments and join neighbours that share a style."""
    out: list[Segment] = []
    for segment in segments:
        if not segment.text:
            continue
        if out and out[-1].style == segment.style:
            out[-1] = Segment(out[-1].text + segment.text, segment.style)
            continue
        out.append(segment)
    return out


class VariableResolver:
    """Resolve one template against ``strategies``.

    Computed values are memoised, so every value callable runs at most once per
    resolver regardless of how often its variable appears.
    """

    def __init__(self, strategies: ResolutionStrategies) -> None:
        self.strategies = strategies
        self._memo: dict[str, str | None] = {}

    def resolve(self, template: Template) -> list[Segment]:
        out: list[Segment] = []
        for node in template.nodes:
            try:
                out.extend(self._node(node))
            except VariableAbsent as absent:
                logger.debug("dropping top-level token: $%s is absent", absent.name)
        return merge_segments(out)

    def _node(self, node: TemplateNode) -> list[Segment]:
        if isinstance(node, Literal):
            return [Segment(node.text)]
        if isinstance(node, Variable):
            return [Segment(self._variable(node.name))]
        if isinstance(node, Meta):
            return [Segment(self._lookup(Strategy.META, node.name))]
        if isinstance(node, Group):
            return self._group(node)
        raise TypeError(f"unknown template node: {node!r}")

    def _group(self, group: Group) -> list[Segment]:
        buffer: list[Segment] = []
        try:
            for child in group.children:
                buffer.extend(self._node(child))
        except VariableAbsent as absent:
            logger.debug("dropping group: $%s is absent", absent.name)
            return []

        style = self._style(group.style)
        if style is None:
            return buffer
        return [Segment(segment.text, segment.style or style) for segment in buffer]

    def _variable(self, name: str) -> str:
        for strategy in VARIABLE_LOOKUP_ORDER:
            try:
                return self._lookup(strategy, name)
            except KeyError:
                continue
        raise VariableAbsent(name)

    def _lookup(self, strategy: Strategy, name: str) -> str:
        """Return the text for ``name``.

        Raises ``KeyError`` when a value strategy does not know ``name`` (so
        the next strategy may try) and ``VariableAbsent`` when the name is known
        but has nothing to show. Meta lookups never fall through; an unknown
        style name is a ``ResolutionError``.
        """
        if strategy is Strategy.META:
            value = self.strategies.meta.get(name)
            if value is None:
                raise VariableAbsent(name)
            return value
        if strategy is Strategy.VALUE:
            if name not in self._memo:
                fn = self.strategies.values.get(name)
                if fn is None:
                    raise KeyError(name)
                self._memo[name] = self._compute(name, fn)
            value = self._memo[name]
            if value is None:
                raise VariableAbsent(name)
            return value
        value = self.strategies.styles.get(name)
        if value is None:
            raise ResolutionError(f"unknown style variable ${name}", variable=name)
        return value

    @staticmethod
    def _compute(name: str, fn: ValueFn) -> str | None:
        try:
            return fn()
        except ResolutionError:
            raise
        except Exception as exc:
            raise ResolutionError(f"failed to compute ${name}: {exc}", variable=name) from exc

    def _style(self, ref: StyleRef | None) -> str | None:
        if ref is None:
            return None
        words: list[str] = []
        for word in ref.words:
            if not word.startswith("$"):
                words.append(word)
                continue
            value = self._lookup(Strategy.STYLE, word[1:])
            if value.strip():
                words.append(value.strip())
        style = " ".join(words)
        return style or None


def resolve(template: Template, strategies: ResolutionStrategies) -> list[Segment]:
    """Resolve ``template`` into an ordered list of styled segments."""
    return VariableResolver(strategies).resolve(template)


def segments_text(segments: Iterable[Segment]) -> str:
    """Concatenate segment texts, ignoring styles."""
    return "".join(segment.text for segment in segments)


__all__ = [
    "Strategy",
    "VARIABLE_LOOKUP_ORDER",
    "ResolutionStrategies",
    "VariableResolver",
    "merge_segments",
    "resolve",
    "segments_text",
]
