"""Tests for PolicyGate."""

import pytest

from projecthub.application.interfaces.services import Actor
from projecthub.application.services.authorization_service import PolicyGate, resource_name
from projecthub.domain.exceptions import AuthorizationException
from projecthub.infrastructure.persistence.models import CustomField, Task

MEMBER = Actor(user_id=1)
ADMIN = Actor(user_id=2, is_admin=True)


class TestPolicyGate:
    """Creates and reads are open; cost-bearing changes need an admin."""

    def test_no_actor_is_denied(self) -> None:
        assert PolicyGate().can_perform(None, "create", "task") is False

    def test_member_may_create_anything(self) -> None:
        gate = PolicyGate()
        assert gate.can_perform(MEMBER, "create", "custom_field") is True
        assert gate.can_perform(MEMBER, "update", "task") is True

    @pytest.mark.parametrize("resource", ["custom_field", "webhook_delivery", "backup"])
    def test_member_may_not_change_cost_bearing(self, resource: str) -> None:
        gate = PolicyGate()
        assert gate.can_perform(MEMBER, "update", resource) is False
        assert gate.can_perform(MEMBER, "delete", resource) is False
        assert gate.can_perform(ADMIN, "delete", resource) is True

    def test_authorize_raises(self) -> None:
        with pytest.raises(AuthorizationException) as exc:
            PolicyGate().authorize(MEMBER, "delete", CustomField)
        assert exc.value.details == {"resource": "custom_field", "action": "delete"}
        assert exc.value.to_dict() == {
            "error": "PERMISSION_DENIED",
            "message": "This action is unauthorized.",
        }


def test_resource_name_from_model_or_instance() -> None:
    assert resource_name(Task) == "task"
    assert resource_name(CustomField(name="x")) == "custom_field"
    assert resource_name("goal") == "goal"
