from typing import Any, Dict, Optional


class TexError(Exception):
    """A fatal error in one TeX parse."""

    def __init__(self, id: str, message: str, offset: Optional[int] = None):
        super().__init__(message)
        self.id = id
        self.message = message
        self.offset = offset

    def __str__(self):
        if self.offset is None:
            return self.message
        return f"{self.message} (at offset {self.offset})"


class UnterminatedFrame(TexError):
    """The input ended while a frame other than the bottom one was still open."""

    def __init__(self, kind: str, properties: Dict[str, Any], offset: Optional[int] = None):
        super().__init__(
            "UnterminatedFrame",
            f"Missing close for '{kind}' opened with {properties}",
            offset,
        )
        self.kind = kind
        self.properties = properties


class UnexpectedCloseContext(TexError):
    """A closing item arrived that the current frame does not accept."""

    def __init__(self, kind: str, token: str, message: Optional[str] = None,
                 offset: Optional[int] = None):
        super().__init__(
            "UnexpectedCloseContext",
            message or f"Unexpected '{token}' in '{kind}'",
            offset,
        )
        self.kind = kind
        self.token = token
