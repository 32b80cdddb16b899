"""
MkDocs plugin that renders Doxygen doc comments as Markdown.

Two things are rewritten in page Markdown:
  - fenced code blocks tagged with the configured language (``doxygen``
    by default) are replaced by the converted comment
  - ``::: doxygen:autodoc`` directives pull every doc comment out of a
    C/C++ file and render one section per documented symbol

Comments that cannot be converted are logged and left as they were,
unless ``strict`` is set.
"""

from __future__ import annotations

import logging
import os
import re
from mkdocs.config import config_options
from mkdocs.config.base import Config as MkDocsConfig
from mkdocs.exceptions import PluginError
from mkdocs.plugins import BasePlugin

from .parser import parse_file_regex
from .renderer import (
    RenderConfig,
    plain_text,
    render_doc,
    render_docs,
    shift_headings,
    try_transform,
)

log = logging.getLogger("mkdocs.plugins.doxymd")

_DIRECTIVE_RE = re.compile(
    r"^(?P<indent>[ \t]*):::[ \t]+doxygen:autodoc\s*\n"
    r"(?P<body>(?:(?P=indent)[ \t]+:\w+:.*\n)*)",
    re.MULTILINE,
)
_OPTION_RE = re.compile(r"^\s+:(\w+):\s*(.+)$", re.MULTILINE)

_CPP_EXTS = frozenset({".cpp", ".hpp", ".cc", ".hh", ".cxx", ".hxx"})


def _fence_re(language):
    return re.compile(
        r"^(?P<indent>[ \t]*)(?P<fence>`{3,}|~{3,})[ \t]*" + re.escape(language) + r"[ \t]*\n"
        r"(?P<body>.*?)\n?^(?P=indent)(?P=fence)[ \t]*$",
        re.MULTILINE | re.DOTALL,
    )


class DoxymdConfig(MkDocsConfig):
    fence_language = config_options.Type(str, default="doxygen")
    heading_level = config_options.Type(int, default=2)
    strict = config_options.Type(bool, default=False)
    source_root = config_options.Type(str, default="")


class DoxymdPlugin(BasePlugin[DoxymdConfig]):

    def __init__(self):
        super().__init__()
        self._cache = {}
        self._fence = None
        self._root = ""
        self._failures = 0

    def _convert(self, comment, where):
        result = try_transform(comment)
        if result.ok:
            return result.markdown
        self._failures += 1
        if self.config["strict"]:
            raise PluginError(f"doxymd: {where}: {result.diagnostic}")
        log.warning("doxymd: %s: %s", where, result.diagnostic)
        return None

    # ── fenced blocks ──

    def _render_fences(self, markdown, page_path):
        if self._fence is None:
            self._fence = _fence_re(self.config["fence_language"])

        def replace(m):
            converted = self._convert(m.group("body"), page_path)
            if converted is None:
                return m.group(0)
            converted = shift_headings(converted, self.config["heading_level"])
            indent = m.group("indent")
            return "\n".join(indent + ln if ln else ln for ln in converted.split("\n"))

        return self._fence.sub(replace, markdown)

    # ── autodoc directive ──

    def _resolve_file(self, path):
        if os.path.isabs(path):
            return path
        return os.path.normpath(os.path.join(self._root, path))

    def _parse(self, filepath):
        if filepath in self._cache:
            return self._cache[filepath]
        if not os.path.isfile(filepath):
            log.error("doxymd: file not found: %s", filepath)
            return []
        docs = parse_file_regex(filepath)
        self._cache[filepath] = docs
        return docs

    def _handle_directive(self, match):
        opts = {}
        for m in _OPTION_RE.finditer(match.group("body")):
            opts[m.group(1)] = m.group(2).strip()
        fpath = opts.get("file", "")
        if not fpath:
            log.error("doxymd: autodoc directive without :file:")
            return "<!-- doxymd: missing :file: for doxygen:autodoc -->\n"

        abspath = self._resolve_file(fpath)
        docs = self._parse(abspath)
        name = opts.get("name", "")
        if name:
            docs = [d for d in docs if d.name == name]
            if not docs:
                return f"<!-- doxymd: symbol '{name}' not found -->\n"

        cfg = RenderConfig(heading_level=self.config["heading_level"] + 1)
        _, ext = os.path.splitext(abspath)
        if ext.lower() in _CPP_EXTS:
            cfg.language = "cpp"
        if "heading_level" in opts:
            try:
                cfg.heading_level = int(opts["heading_level"])
            except ValueError:
                log.warning("doxymd: bad :heading_level: %r", opts["heading_level"])

        rendered = []
        for doc in docs:
            body = self._convert(doc.comment, f"{doc.filename}:{doc.line}")
            if body is None:
                body = plain_text(doc.comment)
            rendered.append(render_doc(doc, body, cfg))
        return render_docs(rendered, title=opts.get("title"), heading_level=cfg.heading_level) + "\n"

    # ── MkDocs lifecycle hooks ──

    def on_config(self, config, **kwargs):
        config_dir = os.path.dirname(config.get("config_file_path", "") or "") or os.getcwd()
        root = self.config["source_root"]
        self._root = os.path.normpath(os.path.join(config_dir, root)) if root else config_dir
        self._cache.clear()
        self._fence = _fence_re(self.config["fence_language"])
        self._failures = 0
        return config

    def on_page_markdown(self, markdown, *, page, config, files, **kwargs):
        src_path = page.file.src_path
        md = _DIRECTIVE_RE.sub(self._handle_directive, markdown)
        return self._render_fences(md, src_path)

    def on_post_build(self, *, config, **kwargs):
        if self._failures:
            log.info("doxymd: %d comment(s) left unconverted", self._failures)
