"""Multi-document YAML decoding.

Files are split on column-0 ``---`` markers so each decoded document keeps
its own source text. Decoding uses ``yaml.safe_load``; empty documents are
dropped. Any decode failure fails the whole file, which then contributes no
documents and one ``YAML parse error`` message.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

import yaml

from cloudgraph.models.documents import DecodedFile, FileInput, SourceDocument
from cloudgraph.observability.logging import get_logger

_logger = get_logger("ingest.decoder")

_RE_DOCUMENT_MARKER = re.compile(r"^---(?:\s|$)")
_RE_DOCUMENT_END = re.compile(r"^\.\.\.(?:\s|$)")


@dataclass(frozen=True)
class DocumentChunk:
    """The text of one YAML document and the line it starts on (0-based)."""

    text: str
    start_line: int


def _is_preamble(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#") or line.startswith("%")


def split_documents(content: str) -> list[DocumentChunk]:
    """Split *content* at document markers; blank chunks are omitted.

    Directives (``%YAML``, ``%TAG``) stay attached to the document they
    introduce, and ``...`` closes the current document.
    """
    chunks: list[DocumentChunk] = []
    current: list[str] = []
    start = 0
    in_document = False
    preamble: list[str] = []
    preamble_start = 0

    def close() -> None:
        if current:
            chunks.append(DocumentChunk("\n".join(current), start))

    for lineno, line in enumerate(content.splitlines()):
        if _RE_DOCUMENT_MARKER.match(line):
            close()
            in_document = True
            if any(p.startswith("%") for p in preamble):
                current = [*preamble, line]
                start = preamble_start
            else:
                # Content after the marker on the same line belongs to the next document.
                rest = line[3:].strip()
                current = [rest] if rest else []
                start = lineno if rest else lineno + 1
            preamble = []
            continue
        if _RE_DOCUMENT_END.match(line):
            close()
            current = []
            in_document = False
            continue
        if not in_document:
            if _is_preamble(line):
                if not preamble:
                    preamble_start = lineno
                preamble.append(line)
                continue
            # A bare document with no leading marker.
            in_document = True
            current = [*preamble, line]
            start = preamble_start if preamble else lineno
            preamble = []
            continue
        if not current:
            start = lineno
        current.append(line)
    close()
    if any(p.startswith("%") for p in preamble):
        # Directives with no document after them; left for the loader to reject.
        chunks.append(DocumentChunk("\n".join(preamble), preamble_start))
    return [chunk for chunk in chunks if chunk.text.strip()]


def yaml_error_line(exc: yaml.YAMLError, offset: int = 0) -> int | None:
    """1-based line of a YAML error, shifted by the chunk offset."""
    mark = getattr(exc, "problem_mark", None)
    if mark is None:
        return None
    return offset + mark.line + 1


def decode_file(file: FileInput) -> DecodedFile:
    documents: list[SourceDocument] = []
    for chunk in split_documents(file.content):
        try:
            document = yaml.safe_load(chunk.text)
        except yaml.YAMLError as exc:
            _logger.info("yaml_decode_failed", file=file.name, line=yaml_error_line(exc, chunk.start_line))
            return DecodedFile(file_name=file.name, errors=[f"YAML parse error: {exc}"])
        if document is None:
            continue
        documents.append(
            SourceDocument(file_name=file.name, document=document, index=len(documents), raw_text=chunk.text)
        )
    return DecodedFile(file_name=file.name, documents=documents)


def decode_files(files: Iterable[FileInput]) -> list[DecodedFile]:
    return [decode_file(f) for f in files]
