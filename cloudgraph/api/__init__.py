"""REST API layer for CloudGraph.

Exposes:
    create_app -- FastAPI application factory.
    build_app  -- Alias for create_app (used by cloudgraph.app bootstrap).
"""

from cloudgraph.api.app import create_app

# The bootstrap in cloudgraph.app imports `build_app` from this package.
build_app = create_app

__all__ = ["build_app", "create_app"]
