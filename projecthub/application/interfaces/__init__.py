"""Application ports (protocols implemented by infrastructure)."""

from projecthub.application.interfaces.services import Actor, AuthorizationGate

__all__ = ["Actor", "AuthorizationGate"]
