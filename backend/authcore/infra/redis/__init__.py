"""Redis-backed session registry and one-time code store."""
