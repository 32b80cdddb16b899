"""
Markdown renderer for Doxygen doc comments.

The emitter walks scanned segments in order and keeps one piece of state,
the section currently open. Section headers are written when that state
changes, so a run of ``@param`` commands shares a single ``# Arguments``
header. Also renders whole symbols (heading, signature, body) for autodoc.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .commands import COMMANDS, INLINE_COMMANDS, Section, Style, section_header
from .diagnostics import Diagnostic, TransformError, malformed
from .parser import SymbolKind, TextSegment, normalize_comment, parse_argument, scan

# ── inline commands ──

_INLINE_RE = re.compile(
    r"(?<![\w@\\])[@\\]("
    + "|".join(sorted(INLINE_COMMANDS, key=len, reverse=True))
    + r")[ \t]+(\S+)"
)


def format_ref(name):
    if "://" in name:
        return f"[{name}]({name})"
    return f"[`{name}`]"


def _replace_inline(m):
    rule = COMMANDS[m.group(1)]
    if rule.style is Style.REFERENCE:
        return format_ref(m.group(2))
    return f"{rule.prefix}{m.group(2)}{rule.suffix}"


def expand_inline(text):
    return _INLINE_RE.sub(_replace_inline, text)


# ── section state ──


@dataclass(frozen=True)
class SectionState:
    section: Section = Section.NONE
    title: str = ""


_NO_SECTION = SectionState()


def transition(state, section, title=""):
    """Return the state after a command in ``section`` and the header it needs.

    The header is None when the command stays in the open section or
    belongs to no section at all.
    """
    if section is Section.NONE:
        return state, None
    target = SectionState(section, title)
    if target == state:
        return state, None
    return target, section_header(section, title)


# ── command bodies ──


def _target(segment, rule):
    if rule.style is Style.HEADING:
        title = expand_inline(segment.raw_args)
        if not title:
            return Section.NONE, ""
        return Section.CUSTOM, title
    return rule.section, ""


def _bullet(arg):
    qualifier = f" [{arg.direction}] " if arg.direction else ""
    return f"* `{arg.name}`{qualifier} - {expand_inline(arg.description)}".rstrip()


def _render_body(segment, rule):
    rest = [expand_inline(ln) for ln in segment.continuation]

    if rule.style is Style.ARGUMENT:
        return [_bullet(parse_argument(segment))] + rest

    if rule.style is Style.REFERENCE:
        parts = segment.raw_args.split(None, 1)
        if not parts:
            raise malformed(segment.name, segment.line, "missing reference")
        head = rule.prefix + format_ref(parts[0])
        if len(parts) > 1:
            head += " " + expand_inline(parts[1])
        return [head] + rest

    if rule.style is Style.HEADING:
        # The argument became the header title
        return rest

    lines = ([expand_inline(segment.raw_args)] if segment.raw_args else []) + rest
    if rule.style is Style.PREFIX:
        if not lines:
            return [rule.prefix.rstrip()]
        lines[0] = rule.prefix + lines[0]
    return lines


def _blank(out, count=1):
    """Make ``out`` end with at least ``count`` blank lines."""
    if not out:
        return
    trailing = 0
    while trailing < len(out) and not out[-1 - trailing]:
        trailing += 1
    out.extend([""] * (count - trailing))


def emit(segments):
    out = []
    state = _NO_SECTION

    for seg in segments:
        if isinstance(seg, TextSegment):
            _blank(out, seg.blanks_before)
            out.extend(expand_inline(ln) for ln in seg.lines)
            continue

        rule = COMMANDS[seg.name]
        section, title = _target(seg, rule)
        body = _render_body(seg, rule)
        state, header = transition(state, section, title)
        if header:
            _blank(out)
            out += [header, ""]
        elif section is Section.NONE and seg.blanks_before:
            _blank(out)
        out.extend(body)

    while out and not out[-1]:
        out.pop()
    return "\n".join(out)


# ── public entry points ──


def transform(comment):
    """Convert one raw Doxygen comment block to Markdown.

    Raises:
        TransformError: the comment uses an unsupported command or a
            command with a malformed argument. The error carries a
            :class:`Diagnostic`.
    """
    return emit(scan(normalize_comment(comment)))


@dataclass(frozen=True)
class TransformResult:
    markdown: str | None = None
    diagnostic: Diagnostic | None = None

    @property
    def ok(self):
        return self.diagnostic is None


def try_transform(comment):
    try:
        return TransformResult(markdown=transform(comment))
    except TransformError as exc:
        return TransformResult(diagnostic=exc.diagnostic)


def plain_text(comment):
    """The normalized comment body, used as a fallback when transform fails."""
    return "\n".join(ln.text for ln in normalize_comment(comment))


# ── heading levels ──

_HEADING_RE = re.compile(r"^(#{1,6})(?=\s)")


def shift_headings(markdown, level):
    """Re-base level-1 headings to ``level``, leaving fenced code alone."""
    if level <= 1:
        return markdown
    lines = []
    in_fence = False
    for line in markdown.split("\n"):
        if line.lstrip().startswith(("```", "~~~")):
            in_fence = not in_fence
        elif not in_fence:
            line = _HEADING_RE.sub(lambda m: min(len(m.group(1)) + level - 1, 6) * "#", line)
        lines.append(line)
    return "\n".join(lines)


# ── symbol rendering ──

_KIND_LABELS = {
    SymbolKind.FUNCTION: "Function",
    SymbolKind.VARIABLE: "Variable",
    SymbolKind.TYPEDEF: "Type",
    SymbolKind.MACRO: "Macro",
    SymbolKind.STRUCT: "Struct",
    SymbolKind.UNION: "Union",
    SymbolKind.ENUM: "Enum",
    SymbolKind.GENERIC: "",
}

_KIND_ANCHOR_PREFIX = {
    SymbolKind.FUNCTION: "func",
    SymbolKind.VARIABLE: "var",
    SymbolKind.TYPEDEF: "type",
    SymbolKind.MACRO: "macro",
    SymbolKind.STRUCT: "struct",
    SymbolKind.UNION: "union",
    SymbolKind.ENUM: "enum",
    SymbolKind.GENERIC: "sym",
}


def anchor_id(doc):
    prefix = _KIND_ANCHOR_PREFIX.get(doc.kind, "sym")
    return f"{prefix}-{doc.name}"


class RenderConfig:
    def __init__(self, *, heading_level=3, language="c", show_signature=True):
        self.heading_level = heading_level
        self.language = language
        self.show_signature = show_signature


def _heading(text, level):
    return f"{'#' * level} {text}"


def render_doc(doc, body, cfg=None):
    """Render one symbol with an already converted Markdown ``body``."""
    if cfg is None:
        cfg = RenderConfig()

    label = _KIND_LABELS.get(doc.kind, "")
    htxt = f"`{doc.name}`"
    if label:
        htxt = f"{label}: {htxt}"

    parts = [f'<a id="{anchor_id(doc)}"></a>', "", _heading(htxt, cfg.heading_level), ""]
    if doc.signature and cfg.show_signature:
        parts += [f"```{cfg.language}", doc.signature, "```", ""]
    if body:
        parts += [shift_headings(body, cfg.heading_level + 1), ""]
    return "\n".join(parts)


def render_docs(rendered, *, title=None, heading_level=3):
    parts = []
    if title:
        parts += [_heading(title, max(1, heading_level - 1)), ""]
    parts.append("\n---\n\n".join(rendered))
    return "\n".join(parts)
