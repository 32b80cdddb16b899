"""
The fixed table of Doxygen commands we know how to render.

Each entry says which output section the command belongs to and how its
body is shaped. Inline commands are substituted inside prose; block commands
start a new segment in the scanner.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType


class Section(Enum):
    NONE = auto()
    ARGUMENTS = auto()
    SEE_ALSO = auto()
    RETURNS = auto()
    CUSTOM = auto()


_SECTION_HEADERS = {
    Section.ARGUMENTS: "Arguments",
    Section.SEE_ALSO: "See also",
    Section.RETURNS: "Returns",
}


class Style(Enum):
    PARAGRAPH = auto()
    ARGUMENT = auto()
    REFERENCE = auto()
    PREFIX = auto()
    HEADING = auto()
    SECTION = auto()
    INLINE = auto()
    UNSUPPORTED = auto()


@dataclass(frozen=True)
class CommandRule:
    style: Style
    section: Section = Section.NONE
    prefix: str = ""
    suffix: str = ""

    @property
    def inline(self):
        return self.style in (Style.INLINE, Style.REFERENCE) and self.section is Section.NONE


def section_header(section, title=""):
    if section is Section.CUSTOM:
        return f"# {title}"
    return f"# {_SECTION_HEADERS[section]}"


_PARAGRAPH = CommandRule(Style.PARAGRAPH)
_ITALIC = CommandRule(Style.INLINE, prefix="_", suffix="_")
_BOLD = CommandRule(Style.INLINE, prefix="**", suffix="**")
_CODE = CommandRule(Style.INLINE, prefix="`", suffix="`")
_SEE = CommandRule(Style.REFERENCE, Section.SEE_ALSO, prefix="> ")
_REMARK = CommandRule(Style.PREFIX, prefix="> ")
_RETURNS = CommandRule(Style.SECTION, Section.RETURNS)
_UNSUPPORTED = CommandRule(Style.UNSUPPORTED)

COMMANDS = MappingProxyType(
    {
        "brief": _PARAGRAPH,
        "short": _PARAGRAPH,
        "param": CommandRule(Style.ARGUMENT, Section.ARGUMENTS),
        "see": _SEE,
        "sa": _SEE,
        "ref": CommandRule(Style.REFERENCE),
        "a": _ITALIC,
        "e": _ITALIC,
        "em": _ITALIC,
        "b": _BOLD,
        "c": _CODE,
        "p": _CODE,
        "note": CommandRule(Style.PREFIX, prefix="> **Note** "),
        "since": CommandRule(Style.PREFIX, prefix="> **Since** "),
        "deprecated": CommandRule(Style.PREFIX, prefix="> **Deprecated** "),
        "remark": _REMARK,
        "remarks": _REMARK,
        "li": CommandRule(Style.PREFIX, prefix="- "),
        "par": CommandRule(Style.HEADING, Section.CUSTOM),
        "returns": _RETURNS,
        "return": _RETURNS,
        "result": _RETURNS,
        "{": _UNSUPPORTED,
        "}": _UNSUPPORTED,
    }
)

INLINE_COMMANDS = frozenset(name for name, rule in COMMANDS.items() if rule.inline)
BLOCK_COMMANDS = frozenset(COMMANDS) - INLINE_COMMANDS
