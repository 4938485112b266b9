"""
Rendering of log templates against their serialized payloads
"""
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any, Iterator, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from logtail.core.config import get_settings
from logtail.core.format_errors import FormatError, MalformedTemplateError, PayloadDecodeError
from logtail.core.logging_config import LoggingConfig
from logtail.core.payload import decode_payload, project
from logtail.core.verbs import NormalizedTemplate, normalize

logger = LoggingConfig.get_logger(__name__)

# A closed verb in normalized text: repeated markers then the string verb.
# A doubled marker belongs to the verb and is consumed with it, unlike "%%" in Python.
_VERB_REGION = re.compile(r"%+s")
_PADDING = re.compile(r"(?P<flags>[-+ #0]*)(?P<width>[1-9][0-9]*)?")


class RenderStatus(str, Enum):
    """Outcome of a render"""
    RENDERED = "rendered"
    SKIPPED = "skipped"
    FAILED = "failed"


class SkipReason(str, Enum):
    """Why nothing was substituted"""
    NO_PLACEHOLDERS = "no_placeholders"
    PAYLOAD_NOT_MAPPING = "payload_not_mapping"


class RenderResult(BaseModel):
    """Rendered text plus how it was obtained"""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    status: RenderStatus
    text: str
    reason: Optional[SkipReason] = None
    error: Optional[FormatError] = Field(default=None, exclude=True)

    @property
    def ok(self) -> bool:
        return self.status != RenderStatus.FAILED

    @classmethod
    def rendered(cls, text: str) -> "RenderResult":
        return cls(status=RenderStatus.RENDERED, text=text)

    @classmethod
    def skipped(cls, text: str, reason: SkipReason) -> "RenderResult":
        return cls(status=RenderStatus.SKIPPED, text=text, reason=reason)

    @classmethod
    def failed(cls, text: str, error: FormatError) -> "RenderResult":
        return cls(status=RenderStatus.FAILED, text=text, error=error)


def _padding_spec(flags: str) -> str:
    """Keep only left alignment and field width from a verb's flags"""
    match = _PADDING.match(flags.replace("[", "").replace("]", "").replace("*", ""))
    spec = "-" if "-" in match.group("flags") else ""
    if match.group("width"):
        spec += match.group("width")
    return spec


def substitute(
    normalized: NormalizedTemplate,
    values: Sequence[Any],
    missing: Optional[str] = None,
) -> str:
    """
    Substitute ``values`` positionally into a normalized template.

    Extra values are ignored; verbs without a value get the missing-value
    marker.
    """
    if missing is None:
        missing = get_settings().missing_value_marker

    remaining: Iterator[Any] = iter(values)
    flags = iter(normalized.verb_flags)

    def _replace(match: re.Match) -> str:
        spec = _padding_spec(next(flags, ""))
        value = next(remaining, missing)
        return ("%" + spec + "s") % (value,)

    return _VERB_REGION.sub(_replace, normalized.text)


def render(template: str, serialized_payload: Union[str, bytes]) -> RenderResult:
    """
    Render a log template with its serialized payload.

    The payload is only decoded when the template has placeholders.

    Args:
        template: sprintf-style template
        serialized_payload: PHP-serialized array

    Returns:
        RenderResult. ``failed`` carries the original template for a
        malformed template and the normalized one for an undecodable
        payload; ``skipped`` carries the template without substitution.
    """
    try:
        normalized = normalize(template)
    except MalformedTemplateError as exc:
        logger.debug("Malformed template", extra={"template": template, **exc.metadata})
        return RenderResult.failed(template, exc)

    if not normalized.needs_values:
        return RenderResult.skipped(normalized.text, SkipReason.NO_PLACEHOLDERS)

    try:
        decoded = decode_payload(serialized_payload)
    except PayloadDecodeError as exc:
        logger.debug("Undecodable payload", extra={"template": template, "error": exc.message})
        return RenderResult.failed(normalized.text, exc)

    if not isinstance(decoded, Mapping):
        return RenderResult.skipped(normalized.text, SkipReason.PAYLOAD_NOT_MAPPING)

    values = project(decoded, normalized.slots)
    return RenderResult.rendered(substitute(normalized, values))
