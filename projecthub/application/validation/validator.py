"""RuleValidator: evaluates a rule map against an input map.

Rule maps are keyed by dot paths; '*' expands over list items (or map keys),
so 'fields.*.name' checks the name of every field. The result is a map of
concrete path -> ordered messages, empty when the input is valid. Each
attribute stops at its first failing rule.
"""

from __future__ import annotations

from typing import Any

from projecthub.application.validation.rules import (
    Nullable,
    RecordChecker,
    Rule,
    RuleContext,
    Sometimes,
    is_empty,
)


def expand_path(data: Any, pattern: str) -> list[str]:
    """Concrete paths matching pattern in data.

    Non-wildcard segments always produce a path (the value may be absent);
    a wildcard over anything but a list or map produces nothing.
    """
    segments = pattern.split(".")
    found: list[str] = []

    def walk(node: Any, index: int, prefix: list[str]) -> None:
        if index == len(segments):
            found.append(".".join(prefix))
            return
        segment = segments[index]
        if segment == "*":
            if isinstance(node, list):
                for i, item in enumerate(node):
                    walk(item, index + 1, [*prefix, str(i)])
            elif isinstance(node, dict):
                for key, item in node.items():
                    walk(item, index + 1, [*prefix, str(key)])
            return
        walk(_child(node, segment)[1], index + 1, [*prefix, segment])

    walk(data, 0, [])
    return found


def _child(node: Any, segment: str) -> tuple[bool, Any]:
    if isinstance(node, dict):
        if segment in node:
            return True, node[segment]
        return False, None
    if isinstance(node, list) and segment.isdigit():
        position = int(segment)
        if position < len(node):
            return True, node[position]
    return False, None


def lookup(data: Any, path: str) -> tuple[bool, Any]:
    """Return (present, value) for a concrete dot path."""
    node = data
    for segment in path.split("."):
        present, node = _child(node, segment)
        if not present:
            return False, None
    return True, node


class RuleValidator:
    """Evaluate rule maps; database rules go through the optional RecordChecker."""

    def __init__(self, checker: RecordChecker | None = None) -> None:
        self.checker = checker

    async def validate(
        self,
        data: dict[str, Any],
        rules: dict[str, list[Rule]],
        current: Any = None,
    ) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        for pattern, rule_list in rules.items():
            for path in expand_path(data, pattern):
                message = await self._validate_attribute(data, path, rule_list, current)
                if message:
                    errors.setdefault(path, []).append(message)
        return errors

    async def _validate_attribute(
        self,
        data: dict[str, Any],
        path: str,
        rules: list[Rule],
        current: Any,
    ) -> str | None:
        present, value = lookup(data, path)
        if not present and any(isinstance(r, Sometimes) for r in rules):
            return None

        siblings = None
        parent_path, _, last = path.rpartition(".")
        if parent_path and last.isdigit():
            parent = lookup(data, parent_path)[1]
            siblings = parent if isinstance(parent, list) else None

        ctx = RuleContext(
            path=path,
            value=value,
            data=data,
            rules=rules,
            current=current,
            checker=self.checker,
            siblings=siblings,
            present=present,
        )
        for rule in rules:
            if rule.implicit:
                message = await rule.evaluate(ctx)
                if message:
                    return message

        if not present:
            return None
        nullable = any(isinstance(r, Nullable) for r in rules)
        if nullable and (value is None or (isinstance(value, str) and is_empty(value))):
            return None

        for rule in rules:
            if rule.implicit or isinstance(rule, (Sometimes, Nullable)):
                continue
            message = await rule.evaluate(ctx)
            if message:
                return message
        return None
