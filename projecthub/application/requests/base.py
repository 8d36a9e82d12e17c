"""Validated request base: prepare, rules, after, validate.

A request wraps one raw input map for one entity operation. validate()
normalizes the input (prepare), evaluates the rule map, runs cross-field and
state-dependent checks (after) and either returns the validated top-level
keys or raises RequestValidationException with every collected error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from projecthub.application.interfaces.repositories import (
    ICustomFieldLookup,
    IEntityResolver,
    IFormLookup,
    ITimeLogLookup,
    IWikiLookup,
)
from projecthub.application.interfaces.services import Actor
from projecthub.application.validation.rules import RecordChecker, Rule
from projecthub.application.validation.validator import RuleValidator
from projecthub.domain.exceptions import RequestValidationException


@dataclass
class ValidationContext:
    """Collaborators a request may consult; built by the composition root."""

    checker: RecordChecker | None = None
    actor: Actor | None = None
    forms: IFormLookup | None = None
    custom_fields: ICustomFieldLookup | None = None
    time_logs: ITimeLogLookup | None = None
    wikis: IWikiLookup | None = None
    entities: IEntityResolver | None = None


class ValidatedRequest:
    """Base class for entity create/update requests.

    Subclasses override rules() and, where needed, prepare() and after().
    On update, current is the stored record; rules that compare against
    other fields fall back to its values when the input omits them.
    """

    def __init__(
        self,
        data: dict[str, Any] | None,
        context: ValidationContext | None = None,
        current: Any = None,
    ) -> None:
        self.data: dict[str, Any] = dict(data or {})
        self.context = context or ValidationContext()
        self.current = current
        self.errors: dict[str, list[str]] = {}

    @property
    def updating(self) -> bool:
        return self.current is not None

    def prepare(self) -> None:
        """Normalize input before validation (defaults, derived values)."""

    def rules(self) -> dict[str, list[Rule]]:
        return {}

    async def build_rules(self) -> dict[str, list[Rule]]:
        """Rule map for this input; override when rules depend on stored records."""
        return self.rules()

    async def after(self) -> None:
        """Cross-field and state-dependent checks; report with add_error()."""

    def add_error(self, path: str, message: str) -> None:
        self.errors.setdefault(path, []).append(message)

    def has_error(self, path: str) -> bool:
        return path in self.errors

    def input(self, key: str, default: Any = None) -> Any:
        """Input value, else the current record's value, else default."""
        if key in self.data:
            return self.data[key]
        if self.current is not None and hasattr(self.current, key):
            return getattr(self.current, key)
        return default

    async def validate(self) -> dict[str, Any]:
        """Validate and return the validated input.

        Raises:
            RequestValidationException: With the field -> messages map.
        """
        self.prepare()
        rules = await self.build_rules()
        validator = RuleValidator(self.context.checker)
        self.errors = await validator.validate(self.data, rules, current=self.current)
        await self.after()
        if self.errors:
            raise RequestValidationException(self.errors)
        keys = {pattern.split(".", 1)[0] for pattern in rules}
        return {k: v for k, v in self.data.items() if k in keys}
