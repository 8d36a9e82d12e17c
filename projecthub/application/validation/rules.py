"""Validation rule vocabulary.

Rules are small objects evaluated by RuleValidator against one concrete
attribute path. Each rule returns an error message or None. Implicit rules
(Required, RequiredIf) run even when the attribute is absent or empty; all
other rules only run on a present, non-empty value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, Protocol

from jsonschema import Draft202012Validator
from pydantic import EmailStr, HttpUrl, TypeAdapter, ValidationError

from projecthub.shared.utils.datetime import parse_datetime, utc_now, utc_today

_email_adapter: TypeAdapter[str] = TypeAdapter(EmailStr)
_url_adapter: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)

_JSON_TYPES = Draft202012Validator.TYPE_CHECKER

_INTEGER_RE = re.compile(r"^[+-]?\d+$")

BOOLEAN_VALUES: tuple[Any, ...] = (True, False, 0, 1, "0", "1")


class RecordChecker(Protocol):
    """Port for database-backed rules (exists, unique)."""

    async def exists(
        self, table: str, column: str, value: Any, where: dict[str, Any] | None = None
    ) -> bool:
        """True if a row in table has column == value (and matches where)."""
        ...

    async def is_unique(
        self,
        table: str,
        column: str,
        value: Any,
        scope: dict[str, Any] | None = None,
        ignore_id: Any = None,
    ) -> bool:
        """True if no other row in table has column == value within scope."""
        ...


@dataclass
class RuleContext:
    """Everything a rule may look at while checking one attribute."""

    path: str
    value: Any
    data: dict[str, Any]
    rules: list[Rule]
    current: Any = None
    checker: RecordChecker | None = None
    siblings: list[Any] | None = None
    present: bool = True

    @property
    def attribute(self) -> str:
        return self.path.replace("_", " ")

    def size_kind(self) -> str:
        """How Min/Max/Between measure this value: numeric, array, file or string."""
        for rule in self.rules:
            if isinstance(rule, IsType):
                if rule.kind in ("integer", "numeric"):
                    return "numeric"
                if rule.kind == "array":
                    return "array"
                if rule.kind == "file":
                    return "file"
        if isinstance(self.value, (list, tuple, dict)):
            return "array"
        if isinstance(self.value, (int, float, Decimal)) and not isinstance(self.value, bool):
            return "numeric"
        return "string"

    def resolve(self, name: str) -> Any:
        """Value of another top-level field, falling back to the current record."""
        if name in self.data:
            return self.data[name]
        if self.current is not None:
            return getattr(self.current, name, None)
        return None


def is_empty(value: Any) -> bool:
    """Null, blank string, or empty collection."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def to_number(value: Any) -> Decimal | None:
    """Numeric value of int/float/Decimal or a numeric string; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            return Decimal(str(value))
        except InvalidOperation:
            return None
    if isinstance(value, str) and value.strip():
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
        return number if number.is_finite() else None
    return None


def _size(ctx: RuleContext) -> Decimal | None:
    kind = ctx.size_kind()
    value = ctx.value
    if kind == "numeric":
        return to_number(value)
    if kind == "array":
        return Decimal(len(value)) if isinstance(value, (list, tuple, dict)) else None
    if kind == "file":
        size = value.get("size") if isinstance(value, dict) else getattr(value, "size", None)
        return Decimal(size) / 1024 if isinstance(size, int) else None
    if isinstance(value, str):
        return Decimal(len(value))
    return None


def _fmt(number: Any) -> str:
    return format(number, "f").rstrip("0").rstrip(".") if isinstance(number, Decimal) else str(number)


class Rule:
    """Base rule. Subclasses implement check() returning a message or None."""

    implicit: ClassVar[bool] = False

    def __init__(self, message: str | None = None) -> None:
        self.custom_message = message

    def _msg(self, default: str) -> str:
        return self.custom_message or default

    def check(self, ctx: RuleContext) -> str | None:
        raise NotImplementedError

    async def evaluate(self, ctx: RuleContext) -> str | None:
        return self.check(ctx)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Required(Rule):
    implicit = True

    def check(self, ctx: RuleContext) -> str | None:
        if is_empty(ctx.value):
            return self._msg(f"The {ctx.attribute} field is required.")
        return None


class Sometimes(Rule):
    """Validate the attribute only when it is present in the input."""

    def check(self, ctx: RuleContext) -> str | None:
        return None


class Nullable(Rule):
    """Allow null (and blank) values; remaining rules are skipped for them."""

    def check(self, ctx: RuleContext) -> str | None:
        return None


class RequiredIf(Rule):
    implicit = True

    def __init__(self, other: str, value: Any, message: str | None = None) -> None:
        super().__init__(message)
        self.other = other
        self.value = value

    def check(self, ctx: RuleContext) -> str | None:
        other = ctx.resolve(self.other)
        expected = self.value.value if hasattr(self.value, "value") else self.value
        actual = other.value if hasattr(other, "value") else other
        if actual is not None and str(actual) == str(expected) and is_empty(ctx.value):
            return self._msg(
                f"The {ctx.attribute} field is required when "
                f"{self.other.replace('_', ' ')} is {expected}."
            )
        return None


class IsType(Rule):
    """Type check.

    kind is one of string, integer, numeric, boolean, date, array, object,
    email, url or file.
    """

    KINDS = (
        "string",
        "integer",
        "numeric",
        "boolean",
        "date",
        "array",
        "object",
        "email",
        "url",
        "file",
    )

    def __init__(self, kind: str, message: str | None = None) -> None:
        if kind not in self.KINDS:
            raise ValueError(f"Unknown type rule: {kind}")
        super().__init__(message)
        self.kind = kind

    def check(self, ctx: RuleContext) -> str | None:
        value = ctx.value
        attr = ctx.attribute
        if self.kind == "string":
            ok = _JSON_TYPES.is_type(value, "string")
            default = f"The {attr} field must be a string."
        elif self.kind == "integer":
            ok = (isinstance(value, int) and not isinstance(value, bool)) or (
                isinstance(value, str) and bool(_INTEGER_RE.match(value.strip()))
            )
            default = f"The {attr} field must be an integer."
        elif self.kind == "numeric":
            ok = to_number(value) is not None
            default = f"The {attr} field must be a number."
        elif self.kind == "boolean":
            ok = any(value is v or (type(value) is type(v) and value == v) for v in BOOLEAN_VALUES)
            default = f"The {attr} field must be true or false."
        elif self.kind == "date":
            ok = parse_datetime(value) is not None
            default = f"The {attr} field must be a valid date."
        elif self.kind == "array":
            ok = _JSON_TYPES.is_type(value, "array")
            default = f"The {attr} field must be an array."
        elif self.kind == "object":
            ok = _JSON_TYPES.is_type(value, "object")
            default = f"The {attr} field must be an object."
        elif self.kind == "email":
            ok = is_valid_email(value)
            default = f"The {attr} field must be a valid email address."
        elif self.kind == "url":
            ok = is_valid_url(value)
            default = f"The {attr} field must be a valid URL."
        else:
            size = value.get("size") if isinstance(value, dict) else getattr(value, "size", None)
            ok = isinstance(size, int)
            default = f"The {attr} field must be a file."
        return None if ok else self._msg(default)

    def __repr__(self) -> str:
        return f"IsType({self.kind!r})"


def is_valid_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def is_valid_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


class Min(Rule):
    def __init__(self, limit: int | float | str, message: str | None = None) -> None:
        super().__init__(message)
        self.limit = Decimal(str(limit))

    def check(self, ctx: RuleContext) -> str | None:
        size = _size(ctx)
        if size is None or size >= self.limit:
            return None
        kind = ctx.size_kind()
        n = _fmt(self.limit)
        if kind == "numeric":
            return self._msg(f"The {ctx.attribute} field must be at least {n}.")
        if kind == "array":
            return self._msg(f"The {ctx.attribute} field must have at least {n} items.")
        if kind == "file":
            return self._msg(f"The {ctx.attribute} field must be at least {n} kilobytes.")
        return self._msg(f"The {ctx.attribute} field must be at least {n} characters.")


class Max(Rule):
    def __init__(self, limit: int | float | str, message: str | None = None) -> None:
        super().__init__(message)
        self.limit = Decimal(str(limit))

    def check(self, ctx: RuleContext) -> str | None:
        size = _size(ctx)
        if size is None or size <= self.limit:
            return None
        kind = ctx.size_kind()
        n = _fmt(self.limit)
        if kind == "numeric":
            return self._msg(f"The {ctx.attribute} field must not be greater than {n}.")
        if kind == "array":
            return self._msg(f"The {ctx.attribute} field must not have more than {n} items.")
        if kind == "file":
            return self._msg(
                f"The {ctx.attribute} field must not be greater than {n} kilobytes."
            )
        return self._msg(
            f"The {ctx.attribute} field must not be greater than {n} characters."
        )


class Between(Rule):
    def __init__(
        self, low: int | float | str, high: int | float | str, message: str | None = None
    ) -> None:
        super().__init__(message)
        self.low = Decimal(str(low))
        self.high = Decimal(str(high))

    def check(self, ctx: RuleContext) -> str | None:
        size = _size(ctx)
        if size is None or self.low <= size <= self.high:
            return None
        kind = ctx.size_kind()
        low, high = _fmt(self.low), _fmt(self.high)
        if kind == "numeric":
            return self._msg(f"The {ctx.attribute} field must be between {low} and {high}.")
        if kind == "array":
            return self._msg(
                f"The {ctx.attribute} field must have between {low} and {high} items."
            )
        return self._msg(
            f"The {ctx.attribute} field must be between {low} and {high} characters."
        )


class Pattern(Rule):
    def __init__(self, regex: str, message: str | None = None) -> None:
        super().__init__(message)
        self.regex = re.compile(regex)

    def check(self, ctx: RuleContext) -> str | None:
        value = ctx.value
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str) and self.regex.search(value):
            return None
        return self._msg(f"The {ctx.attribute} field format is invalid.")


class In(Rule):
    def __init__(self, choices: Any, message: str | None = None) -> None:
        super().__init__(message)
        self.choices = [c.value if hasattr(c, "value") else c for c in choices]

    def check(self, ctx: RuleContext) -> str | None:
        value = ctx.value
        if isinstance(value, (list, dict)):
            return self._msg(f"The selected {ctx.attribute} is invalid.")
        if value in self.choices or (
            not isinstance(value, bool) and str(value) in [str(c) for c in self.choices]
        ):
            return None
        return self._msg(f"The selected {ctx.attribute} is invalid.")


class _DateComparison(Rule):
    """Compare a date value with another field, 'today' or 'now'."""

    verb: ClassVar[str] = ""

    def __init__(self, reference: str, message: str | None = None) -> None:
        super().__init__(message)
        self.reference = reference

    def _reference_value(self, ctx: RuleContext) -> datetime | None:
        if self.reference == "today":
            return datetime.combine(utc_today(), time.min, tzinfo=utc_now().tzinfo)
        if self.reference == "now":
            return utc_now()
        return parse_datetime(ctx.resolve(self.reference))

    def _passes(self, value: datetime, reference: datetime) -> bool:
        raise NotImplementedError

    def check(self, ctx: RuleContext) -> str | None:
        value = parse_datetime(ctx.value)
        reference = self._reference_value(ctx)
        if reference is None:
            return None
        if value is not None and self._passes(value, reference):
            return None
        label = self.reference.replace("_", " ")
        return self._msg(f"The {ctx.attribute} field must be a date {self.verb} {label}.")


class After(_DateComparison):
    verb = "after"

    def _passes(self, value: datetime, reference: datetime) -> bool:
        return value > reference


class AfterOrEqual(_DateComparison):
    verb = "after or equal to"

    def _passes(self, value: datetime, reference: datetime) -> bool:
        return value >= reference


class BeforeOrEqual(_DateComparison):
    verb = "before or equal to"

    def _passes(self, value: datetime, reference: datetime) -> bool:
        return value <= reference


class Distinct(Rule):
    """Value must not repeat among the items of the enclosing list."""

    def check(self, ctx: RuleContext) -> str | None:
        if ctx.siblings is None:
            return None
        if sum(1 for item in ctx.siblings if item == ctx.value) > 1:
            return self._msg(f"The {ctx.attribute} field has a duplicate value.")
        return None


class Exists(Rule):
    """A row with column == value must exist in table."""

    def __init__(
        self,
        table: str,
        column: str = "id",
        where: dict[str, Any] | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.table = table
        self.column = column
        self.where = where or {}

    def check(self, ctx: RuleContext) -> str | None:
        return None

    async def evaluate(self, ctx: RuleContext) -> str | None:
        if ctx.checker is None:
            return None
        if isinstance(ctx.value, (list, dict)):
            return self._msg(f"The selected {ctx.attribute} is invalid.")
        if await ctx.checker.exists(self.table, self.column, ctx.value, self.where):
            return None
        return self._msg(f"The selected {ctx.attribute} is invalid.")


class Unique(Rule):
    """No other row in table may share column == value within the scope columns.

    Scope values come from the input, falling back to the current record;
    a None scope value matches NULL. ignore_id excludes one row (updates).
    """

    def __init__(
        self,
        table: str,
        column: str,
        scope: tuple[str, ...] = (),
        ignore_id: Any = None,
        message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.table = table
        self.column = column
        self.scope = scope
        self.ignore_id = ignore_id

    def check(self, ctx: RuleContext) -> str | None:
        return None

    async def evaluate(self, ctx: RuleContext) -> str | None:
        if ctx.checker is None or isinstance(ctx.value, (list, dict)):
            return None
        scope = {name: ctx.resolve(name) for name in self.scope}
        if await ctx.checker.is_unique(
            self.table, self.column, ctx.value, scope, self.ignore_id
        ):
            return None
        return self._msg(f"The {ctx.attribute} has already been taken.")

