"""SQLAlchemy user repository."""
