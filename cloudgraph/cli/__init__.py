"""CloudGraph command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``cloudgraph`` script).
"""

from cloudgraph.cli.main import cli

__all__ = ["cli"]
