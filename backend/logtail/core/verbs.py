"""
Normalization of printf-style format verbs.

Log templates are written for PHP's ``sprintf`` and may contain any verb
(``%d``, ``%05.2f``, ``%x`` ...). Payload values are stringified before
substitution, so every verb is collapsed into a plain ``%s``. The flags of
each verb are recorded separately so substitution can still honour the
field width.
"""
from dataclasses import dataclass
from typing import List, Tuple

from logtail.core.format_errors import MalformedTemplateError

VERB_MARKER = "%"
STRING_VERB = "s"

# Characters that terminate a verb
TYPE_CHARACTERS = frozenset("vTtbcdoqxXUeEfFgGsp")

# Width, precision, sign, padding and argument-index modifiers
FLAG_CHARACTERS = frozenset("0123456789+. -#[]*")


@dataclass(frozen=True)
class NormalizedTemplate:
    """Template with every verb rewritten to ``%s``"""
    text: str
    slots: int
    verb_flags: Tuple[str, ...] = ()

    @property
    def needs_values(self) -> bool:
        return self.slots > 0


def normalize(template: str) -> NormalizedTemplate:
    """
    Rewrite every verb of ``template`` into the generic string verb.

    A marker seen while a verb is already open is emitted as-is and does not
    open a second verb. A verb still open at the end of the template is
    counted but left unterminated.

    Args:
        template: Format template written for sprintf

    Returns:
        NormalizedTemplate with the rewritten text, the number of verbs
        and the flags recorded for each verb

    Raises:
        MalformedTemplateError: a character that is neither a flag nor a
            type character appears inside a verb
    """
    out: List[str] = []
    verb_flags: List[str] = []
    flags: List[str] = []
    inside_verb = False
    slots = 0

    for position, char in enumerate(template):
        if char == VERB_MARKER:
            if not inside_verb:
                inside_verb = True
                slots += 1
                flags = []
            out.append(VERB_MARKER)
            continue

        if not inside_verb:
            out.append(char)
        elif char in TYPE_CHARACTERS:
            inside_verb = False
            out.append(STRING_VERB)
            verb_flags.append("".join(flags))
        elif char in FLAG_CHARACTERS:
            flags.append(char)
        else:
            raise MalformedTemplateError(char, position)

    if slots == 0:
        return NormalizedTemplate(text=template, slots=0)

    if inside_verb:
        verb_flags.append("".join(flags))

    return NormalizedTemplate(text="".join(out), slots=slots, verb_flags=tuple(verb_flags))
