# fedimodel/errors.py
"""
Errors raised while decoding ActivityPub documents.

Decoding has exactly one hard failure mode: a required property is missing
or none of its legal wire shapes match. Everything else degrades to
"no information" and is only logged.
"""

from typing import Optional


class DecodeError(ValueError):
    """
    A document (or one of its properties) could not be decoded.

    Attributes:
        message: Human-readable description of the failure
        field: Wire property that failed, if known (e.g. "inbox")
        document_id: ``id`` of the enclosing document, if it could be read
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        document_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.document_id = document_id

    def in_document(self, document_id: Optional[str]) -> "DecodeError":
        """Attach the enclosing document id unless a nested one is already known."""
        if self.document_id is None and document_id:
            self.document_id = document_id
        return self

    def __str__(self) -> str:
        details = []
        if self.field:
            details.append(f"field '{self.field}'")
        if self.document_id:
            details.append(f"document {self.document_id}")
        if not details:
            return self.message
        return f"{self.message} ({', '.join(details)})"
