"""Application services (business rules, no HTTP or ORM session handling)."""
