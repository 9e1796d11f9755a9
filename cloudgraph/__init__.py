"""CloudGraph: dependency analysis for compose files and cluster manifests."""

__version__ = "0.1.0"
