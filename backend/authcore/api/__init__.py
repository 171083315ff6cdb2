"""HTTP surface: versioned blueprint registration."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def _join(*parts: str) -> str:
    return "/" + "/".join(p.strip("/") for p in parts if p.strip("/"))


def mount(app: Flask, prefix: str, routes: Iterable[tuple[Blueprint, str]]) -> list[str]:
    """Register each ``(blueprint, sub_path)`` under ``prefix``.

    :param app: application receiving the blueprints.
    :param prefix: shared mount point such as ``"/api/v1"``.
    :param routes: pairs of blueprint and path relative to ``prefix``.
    :returns: the URL prefixes that were registered, in order.
    """
    mounted: list[str] = []
    for blueprint, sub_path in routes:
        url_prefix = _join(prefix, sub_path)
        app.register_blueprint(blueprint, url_prefix=url_prefix)
        mounted.append(url_prefix)
    return mounted


def init_app(app: Flask) -> None:
    """Mount every API version below ``API_BASE_PREFIX``."""
    from authcore.api import v1

    base = app.config.get("API_BASE_PREFIX", "/api")
    mounted = mount(app, _join(base, v1.API_VERSION), v1.REGISTRY)
    app.logger.debug("API mounted", extra={"endpoint": ",".join(mounted)})


__all__ = ["init_app", "mount"]
