"""
Doc comment parsing for Doxygen-style C/C++ comments.

Three layers, each feeding the next:
  - comment normalization (delimiters and per-line decoration removed)
  - command scanning (lines split into text and command segments)
  - source extraction (doc comments and the declarations they document)

Nothing in here keeps state between calls.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from enum import Enum, auto

from .commands import BLOCK_COMMANDS, COMMANDS, Style
from .diagnostics import malformed, unsupported


@dataclass(frozen=True)
class Line:
    index: int
    text: str


@dataclass
class TextSegment:
    lines: list[str]
    line: int = 0
    blanks_before: int = 0


@dataclass
class CommandSegment:
    name: str
    raw_args: str = ""
    continuation: list[str] = field(default_factory=list)
    line: int = 0
    blanks_before: int = 0


@dataclass(frozen=True)
class ArgumentSpec:
    name: str
    direction: str = ""
    description: str = ""


# ── comment normalization ──

_OPENERS = ("/**<", "/*!<", "/**", "/*!", "/*")
_DECORATION_RE = re.compile(r"^\s*(?:/{2,}[!<]?|\*+)")


def normalize_comment(raw):
    text = raw.strip()
    for opener in _OPENERS:
        if text.startswith(opener):
            text = text[len(opener) :]
            break
    if text.endswith("*/"):
        text = text[:-2]

    cleaned = [_DECORATION_RE.sub("", ln, count=1).strip() for ln in text.splitlines()]

    while cleaned and not cleaned[-1]:
        cleaned.pop()
    while cleaned and not cleaned[0]:
        cleaned.pop(0)

    return [Line(i, t) for i, t in enumerate(cleaned)]


# ── command scanning ──


def _introducer_re(names):
    words = sorted((n for n in names if n.isalnum()), key=len, reverse=True)
    marks = "".join(re.escape(n) for n in sorted(names) if not n.isalnum())
    # Word commands need a delimiter after the name, "@{" and "@}" never do
    return re.compile(rf"(?<!\S)[@\\]((?:{'|'.join(words)})(?=[\s\[]|$)|[{marks}])")


_BLOCK_RE = _introducer_re(BLOCK_COMMANDS)


def _split_commands(text):
    """Split one line into (command or None, text) pieces."""
    matches = list(_BLOCK_RE.finditer(text))
    if not matches:
        return [(None, text)]
    pieces = []
    lead = text[: matches[0].start()].strip()
    if lead:
        pieces.append((None, lead))
    for i, m in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        pieces.append((m.group(1), text[m.end() : end].strip()))
    return pieces


def scan(lines):
    segments = []
    current = None
    blanks = 0

    for line in lines:
        if not line.text:
            current = None
            if segments:
                blanks += 1
            continue

        for name, text in _split_commands(line.text):
            if name is not None:
                if COMMANDS[name].style is Style.UNSUPPORTED:
                    raise unsupported(name, line.index)
                current = CommandSegment(name, text, [], line.index, blanks)
                segments.append(current)
            elif current is None:
                current = TextSegment([text], line.index, blanks)
                segments.append(current)
            elif isinstance(current, TextSegment):
                current.lines.append(text)
            else:
                current.continuation.append(text)
            blanks = 0

    return segments


_QUALIFIER_RE = re.compile(r"\[([^\]]*)\]")
_DIRECTION_WORDS = frozenset({"in", "out", "optional"})


def parse_argument(segment):
    args = segment.raw_args
    direction = ""

    if args.startswith("["):
        m = _QUALIFIER_RE.match(args)
        if not m:
            raise malformed(segment.name, segment.line, "expected closing ']' after direction")
        direction = m.group(1).strip()
        words = [w.strip() for w in direction.split(",")]
        if not direction or any(w not in _DIRECTION_WORDS for w in words):
            raise malformed(
                segment.name, segment.line, f"unknown direction qualifier '[{direction}]'"
            )
        args = args[m.end() :].lstrip()

    parts = args.split(None, 1)
    if not parts:
        raise malformed(segment.name, segment.line, "missing parameter name")
    return ArgumentSpec(parts[0], direction, parts[1] if len(parts) > 1 else "")


# ── source extraction ──


class SymbolKind(Enum):
    FUNCTION = auto()
    VARIABLE = auto()
    TYPEDEF = auto()
    MACRO = auto()
    STRUCT = auto()
    UNION = auto()
    ENUM = auto()
    GENERIC = auto()


@dataclass
class DocComment:
    name: str
    kind: SymbolKind
    comment: str
    signature: str = ""
    filename: str = ""
    line: int = 0


@dataclass(frozen=True)
class RawComment:
    text: str
    line: int
    start: int
    end: int
    block: bool = True
    opener: str = "/**"

    @property
    def trailing(self):
        """True for ``/**<``-style comments documenting the preceding member."""
        return self.opener.endswith("<")


_OPENER_RE = re.compile(r"[ \t]*(/\*[*!]<?|//[/!]<?)")
_DOC_COMMENT_RE = re.compile(
    r"(?P<block>/\*[*!](?!/).*?\*/)|(?P<lines>(?:^[ \t]*//[/!][^\n]*(?:\n|\Z))+)",
    re.DOTALL | re.MULTILINE,
)


def extract_comments(source):
    found = []
    for m in _DOC_COMMENT_RE.finditer(source):
        if m.group("block"):
            text = m.group("block")
            block = True
        else:
            text = m.group("lines").rstrip("\n")
            block = False
        start = m.start()
        found.append(
            RawComment(
                text=text,
                line=source.count("\n", 0, start) + 1,
                start=start,
                end=start + len(text),
                block=block,
                opener=_OPENER_RE.match(text).group(1),
            )
        )
    return found


_DECL_RE = re.compile(r"[ \t]*\n\s*([^\n;{]+)")
_TAGGED_KINDS = {
    "struct": SymbolKind.STRUCT,
    "union": SymbolKind.UNION,
    "enum": SymbolKind.ENUM,
}


def _last_name(text):
    tokens = text.replace("*", " ").split()
    return tokens[-1] if tokens else ""


def _classify(decl):
    if decl.startswith("#define"):
        parts = decl.split()
        name = parts[1].split("(")[0] if len(parts) > 1 else ""
        return SymbolKind.MACRO, name
    if decl.startswith("typedef "):
        if "(" in decl:
            # typedef int (*handler_t)(int);
            inner = re.search(r"\(\s*\*?\s*(\w+)\s*\)", decl)
            return SymbolKind.TYPEDEF, inner.group(1) if inner else ""
        return SymbolKind.TYPEDEF, _last_name(decl)
    if "(" in decl:
        return SymbolKind.FUNCTION, _last_name(decl.split("(")[0])
    keyword, _, rest = decl.partition(" ")
    if keyword in _TAGGED_KINDS:
        return _TAGGED_KINDS[keyword], _last_name(rest) if rest.strip() else ""
    if decl.startswith("#"):
        return SymbolKind.GENERIC, ""
    return SymbolKind.VARIABLE, _last_name(decl.split("=")[0].split("[")[0])


def parse_source(source, filename=""):
    docs = []
    for raw in extract_comments(source):
        if raw.trailing:
            continue
        m = _DECL_RE.match(source, raw.end)
        if not m:
            continue
        decl = m.group(1).strip()
        # Skip if "declaration" is actually another comment
        if not decl or decl.startswith(("/*", "//")):
            continue
        kind, name = _classify(decl)
        if not name:
            continue
        docs.append(
            DocComment(
                name=name,
                kind=kind,
                comment=raw.text,
                signature=decl.rstrip(),
                filename=filename,
                line=raw.line,
            )
        )
    return docs


def parse_file_regex(filepath):
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        source = f.read()
    return parse_source(source, os.path.basename(filepath))
