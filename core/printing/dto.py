"""
Data Transfer Objects for the Printing Framework
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RenderResult:
    """
    A finished certificate ready to be sent to the client.

    ``filename`` is already safe to use inside a quoted header value.
    """

    pdf_bytes: bytes
    filename: str
    content_type: str = "application/pdf"

    def __len__(self) -> int:
        return len(self.pdf_bytes)

    def content_disposition(self, attachment: bool = False) -> str:
        """Content-Disposition value: shown in the browser, or downloaded"""
        kind = 'attachment' if attachment else 'inline'
        return f'{kind}; filename="{self.filename}"'
