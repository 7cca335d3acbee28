"""Title-check response -- does the producer know the requested book?"""

from __future__ import annotations

from pydantic import BaseModel

from .document import Document


class TitleCheck(BaseModel):
    """``known=False`` is a normal outcome, not a failure."""

    known: bool
    analysis: Document | None = None

    @property
    def recognized(self) -> bool:
        """True only when the producer both knows the title and sent a document."""
        return self.known and self.analysis is not None
