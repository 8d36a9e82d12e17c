"""Tests for domain exceptions and their serialized form."""

from projecthub.domain.exceptions import (
    AuthenticationException,
    DomainInvariantException,
    ProjectHubException,
    RequestValidationException,
    ResourceNotFoundException,
)


def test_base_exception_defaults_code_to_class_name() -> None:
    exc = ProjectHubException("boom")
    assert exc.to_dict() == {"error": "ProjectHubException", "message": "boom", "details": {}}


def test_request_validation_exception() -> None:
    errors = {"title": ["The title field is required."]}
    exc = RequestValidationException(errors)
    assert exc.errors == errors
    assert exc.to_dict() == {
        "error": "VALIDATION_FAILED",
        "message": "The given data was invalid.",
        "errors": errors,
    }


def test_resource_not_found() -> None:
    exc = ResourceNotFoundException("wiki", 12)
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "wiki", "resource_id": "12"}


def test_domain_invariant_keeps_invariant_name() -> None:
    exc = DomainInvariantException("no owner left", "conversation_owner_required")
    assert exc.error_code == "DOMAIN_INVARIANT_VIOLATED"
    assert exc.details["invariant"] == "conversation_owner_required"


def test_authentication_default_message() -> None:
    assert AuthenticationException().message == "Authentication required"
