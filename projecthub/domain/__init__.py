"""Domain layer: exceptions and enumerations (no infrastructure imports)."""
