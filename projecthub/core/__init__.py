"""Core: settings, exception handlers, lifespan, rate limiting."""
