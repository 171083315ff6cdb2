"""Errors, key namespaces and ports shared by services."""
