"""Turning submitted file text into decoded documents.

Exposes:
    decode_files   -- YAML-decode a batch of files for the pipeline.
    validate_files -- structural checks without running an analysis.
"""

from cloudgraph.ingest.decoder import decode_file, decode_files, split_documents
from cloudgraph.ingest.validation import ValidationIssue, ValidationReport, validate_files

__all__ = [
    "ValidationIssue",
    "ValidationReport",
    "decode_file",
    "decode_files",
    "split_documents",
    "validate_files",
]
