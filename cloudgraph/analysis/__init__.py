"""Analysis stages run over the extracted resources and dependencies.

Modules are imported directly (``cloudgraph.analysis.pipeline`` and so on);
this package exports nothing so the stages can depend on each other freely.
"""
