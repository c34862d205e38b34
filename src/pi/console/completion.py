"""Context-aware tab completion.

Completion items are registered under a *context*: a trigger string that
the input must start with for the items to apply.  Triggers live in one
flat namespace; ``"config"`` and ``"config set"`` are independent nodes and
the longest trigger that prefixes the input wins.  Registering under the
empty context attaches items to the root, which applies when nothing more
specific matches.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Union


class MatchStrategy(enum.Enum):
    """How a context's items are filtered against the input."""

    ALL = "all"
    """Show every item regardless of the input."""

    PREFIX = "prefix"
    """Keep items starting with the text typed after the trigger."""

    CONTAINS = "contains"
    """Keep items containing the last whitespace-delimited input token."""


@dataclass(frozen=True)
class CompletionItem:
    """A single completion item with optional description and priority."""

    text: str
    description: str | None = None
    priority: int = 0

    def __post_init__(self) -> None:
        if self.priority < 0:
            raise ValueError(f"priority must be non-negative, got {self.priority}")


@dataclass(frozen=True)
class CompletionCandidate:
    """A completion ready for display or insertion."""

    full_text: str
    completion: str
    description: str | None = None


@dataclass
class ContextNode:
    """A node of the completion tree; ``trigger`` is ``None`` only for the root."""

    trigger: str | None = None
    items: list[CompletionItem] = field(default_factory=list)
    children: list[ContextNode] = field(default_factory=list)
    match_strategy: MatchStrategy = MatchStrategy.PREFIX


ItemLike = Union[CompletionItem, str]


def _as_item(item: ItemLike) -> CompletionItem:
    return item if isinstance(item, CompletionItem) else CompletionItem(item)


def _filter_items(
    items: list[CompletionItem],
    strategy: MatchStrategy,
    remainder: str,
    full_input: str,
) -> list[CompletionItem]:
    if strategy is MatchStrategy.PREFIX:
        if not remainder:
            return list(items)
        return [item for item in items if item.text.startswith(remainder)]

    if strategy is MatchStrategy.CONTAINS:
        tokens = full_input.split()
        search = tokens[-1] if tokens else ""
        return [item for item in items if search in item.text]

    return list(items)


class CompletionTree:
    """Registry of completion contexts with a one-entry query cache."""

    def __init__(self) -> None:
        self._root = ContextNode()
        self._nodes: dict[str, ContextNode] = {}
        self._last_input: str | None = None
        self._cached: list[CompletionCandidate] = []

    @property
    def root(self) -> ContextNode:
        return self._root

    def contexts(self) -> list[str]:
        """Registered non-root triggers, in creation order."""
        return list(self._nodes)

    def find(self, context: str) -> ContextNode | None:
        """Return the node registered for *context* (``""`` is the root)."""
        if not context:
            return self._root
        return self._nodes.get(context)

    def _find_or_create(self, context: str) -> ContextNode:
        node = self.find(context)
        if node is None:
            node = ContextNode(trigger=context)
            self._root.children.append(node)
            self._nodes[context] = node
        return node

    # -- registration -------------------------------------------------------

    def register(
        self,
        context: str,
        items: Iterable[ItemLike],
        strategy: MatchStrategy = MatchStrategy.PREFIX,
    ) -> None:
        """Append *items* to *context* and set its match strategy.

        Registering the same context again accumulates items; the latest
        strategy wins.
        """
        node = self._find_or_create(context)
        node.items.extend(_as_item(item) for item in items)
        node.match_strategy = strategy
        self.clear_cache()

    def register_with_descriptions(
        self,
        context: str,
        items: Iterable[tuple[str, str]],
    ) -> None:
        """Register ``(text, description)`` pairs with prefix matching."""
        self.register(
            context,
            [CompletionItem(text, description) for text, description in items],
        )

    def add(
        self,
        context: str,
        text: str,
        description: str | None = None,
        priority: int = 0,
    ) -> None:
        """Append a single item, leaving the context's strategy unchanged."""
        node = self._find_or_create(context)
        node.items.append(CompletionItem(text, description, priority))
        self.clear_cache()

    def clear_cache(self) -> None:
        self._last_input = None
        self._cached = []

    # -- lookup -------------------------------------------------------------

    def _longest_match(self, text: str) -> ContextNode:
        best = self._root
        best_len = 0
        for trigger, node in self._nodes.items():
            if len(trigger) > best_len and text.startswith(trigger):
                best = node
                best_len = len(trigger)
        return best

    def get_candidates(self, text: str) -> list[CompletionCandidate]:
        """Return the completion candidates for *text*, best first."""
        if text == self._last_input:
            return list(self._cached)

        node = self._longest_match(text)
        trigger = node.trigger or ""
        remainder = text[len(trigger):].lstrip()

        filtered = _filter_items(node.items, node.match_strategy, remainder, text)
        # sorted() is stable, so equal priorities keep registration order
        filtered = sorted(filtered, key=lambda item: -item.priority)

        result = [
            CompletionCandidate(
                full_text=f"{trigger} {item.text}" if trigger else item.text,
                completion=item.text,
                description=item.description,
            )
            for item in filtered
        ]

        self._last_input = text
        self._cached = result
        return list(result)

    def get_best_match(self, text: str) -> str | None:
        """Return the full text of the top candidate for *text*, if any."""
        candidates = self.get_candidates(text)
        return candidates[0].full_text if candidates else None
