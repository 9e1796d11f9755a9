"""Input data structures: decoded documents grouped by source file."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SourceDocument:
    """One decoded document plus its position in the batch."""

    file_name: str
    document: object
    index: int = 0
    raw_text: str | None = None


@dataclass
class DecodedFile:
    """All documents decoded from one input file.

    ``errors`` holds decode-time failures; a file with errors contributes
    no documents.
    """

    file_name: str
    documents: list[SourceDocument] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @classmethod
    def from_documents(cls, file_name: str, documents: list[object]) -> DecodedFile:
        """Wrap already-decoded documents (no raw text available)."""
        return cls(
            file_name=file_name,
            documents=[SourceDocument(file_name=file_name, document=doc, index=i) for i, doc in enumerate(documents)],
        )


@dataclass(frozen=True)
class FileInput:
    """A named configuration file as submitted by a front-end."""

    name: str
    content: str
