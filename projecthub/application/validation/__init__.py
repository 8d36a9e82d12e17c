"""Validation rule builder: rule vocabulary, validator and dynamic schemas."""

from projecthub.application.validation.dynamic import (
    custom_field_value_errors,
    custom_field_value_schema,
    form_response_errors,
    form_response_schema,
)
from projecthub.application.validation.rules import (
    After,
    AfterOrEqual,
    BeforeOrEqual,
    Between,
    Distinct,
    Exists,
    In,
    IsType,
    Max,
    Min,
    Nullable,
    Pattern,
    RecordChecker,
    Required,
    RequiredIf,
    Rule,
    Sometimes,
    Unique,
)
from projecthub.application.validation.validator import RuleValidator, expand_path, lookup

__all__ = [
    "After",
    "AfterOrEqual",
    "BeforeOrEqual",
    "Between",
    "Distinct",
    "Exists",
    "In",
    "IsType",
    "Max",
    "Min",
    "Nullable",
    "Pattern",
    "RecordChecker",
    "Required",
    "RequiredIf",
    "Rule",
    "RuleValidator",
    "Sometimes",
    "Unique",
    "custom_field_value_errors",
    "custom_field_value_schema",
    "expand_path",
    "form_response_errors",
    "form_response_schema",
    "lookup",
]
