"""Application DTOs (no dependency on ORM)."""

from projecthub.application.dtos.pagination import Page

__all__ = ["Page"]
