"""Shared cross-cutting helpers (datetime, text, logging)."""
