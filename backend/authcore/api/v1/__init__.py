"""Version 1 of the HTTP API."""

from __future__ import annotations

from flask import Blueprint

from .auth import bp as auth_bp

API_VERSION = "v1"

# (blueprint, path below /api/v1)
REGISTRY: list[tuple[Blueprint, str]] = [(auth_bp, "/auth")]
