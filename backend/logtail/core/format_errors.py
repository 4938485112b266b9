"""
Error types raised while rendering log templates
"""
from enum import Enum
from typing import Any, Dict, Optional


class FormatErrorKind(str, Enum):
    """What part of the rendering failed"""
    MALFORMED_TEMPLATE = "malformed_template"  # Template itself is broken
    PAYLOAD_DECODE = "payload_decode"  # Serialized payload could not be parsed


class FormatError(Exception):
    """Base class for rendering errors"""

    kind: FormatErrorKind

    def __init__(self, message: str, metadata: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary"""
        return {
            "message": self.message,
            "kind": self.kind.value,
            "metadata": self.metadata,
        }


class MalformedTemplateError(FormatError):
    """An unrecognized character appeared inside a format verb"""

    kind = FormatErrorKind.MALFORMED_TEMPLATE

    def __init__(self, character: str, position: int):
        super().__init__(
            f"Unexpected character {character!r} inside format verb at offset {position}",
            metadata={"character": character, "position": position},
        )
        self.character = character
        self.position = position


class PayloadDecodeError(FormatError):
    """The serialized payload could not be decoded"""

    kind = FormatErrorKind.PAYLOAD_DECODE
