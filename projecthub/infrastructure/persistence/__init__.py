"""Persistence: SQLAlchemy engine/session, models, repositories, filters."""
