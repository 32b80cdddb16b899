#!/usr/bin/env python3
"""
Batch convert Doxygen markup to Markdown in C/C++ doc comments.

Usage:
    python -m mkdocs_doxymd.convert src/
    python -m mkdocs_doxymd.convert src/engine.h --dry-run
    python -m mkdocs_doxymd.convert src/ --ext .c .h --backup
    python -m mkdocs_doxymd.convert include/ --strict
"""

import argparse
import os
import shutil
import sys

from .parser import extract_comments
from .renderer import plain_text, try_transform


def _indent_of(source, start):
    line_start = source.rfind("\n", 0, start) + 1
    prefix = source[line_start:start]
    if prefix.strip():
        return ""
    return prefix


def _as_block(markdown, indent):
    out = ["/**"]
    for line in markdown.split("\n"):
        out.append(f"{indent} * {line}" if line else f"{indent} *")
    out.append(f"{indent} */")
    return "\n".join(out)


def _as_lines(markdown, indent):
    return "\n".join(f"{indent}/// {ln}" if ln else f"{indent}///" for ln in markdown.split("\n"))


def convert_source(source):
    """Return (converted source, diagnostics) for one file's contents.

    Trailing member comments (``/**<``, ``///<``) are left as they are:
    rewriting them as leading blocks would move their documentation to
    the next declaration.
    """
    pieces = []
    problems = []
    last = 0
    for raw in extract_comments(source):
        if raw.trailing:
            continue
        result = try_transform(raw.text)
        if not result.ok:
            problems.append((raw.line, result.diagnostic))
            continue
        if result.markdown == plain_text(raw.text):
            continue
        if raw.block:
            replacement = _as_block(result.markdown, _indent_of(source, raw.start))
        else:
            indent = raw.text[: len(raw.text) - len(raw.text.lstrip())]
            replacement = _as_lines(result.markdown, indent)
        pieces.append(source[last : raw.start])
        pieces.append(replacement)
        last = raw.end
    pieces.append(source[last:])
    return "".join(pieces), problems


def convert_file(path, dry_run=False, backup=False):
    """Convert one file in place; return (changed, number of unconverted comments)."""
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        original = f.read()

    result, problems = convert_source(original)
    for line, diag in problems:
        print(f"warning: {path}:{line}: {diag}", file=sys.stderr)

    if result == original or dry_run:
        return result != original, len(problems)

    if backup:
        shutil.copy2(path, path + ".bak")

    with open(path, "w", encoding="utf-8") as f:
        f.write(result)
    return True, len(problems)


def _collect_files(target, exts):
    if os.path.isfile(target):
        return [target]
    files = []
    for dirpath, dirnames, fnames in os.walk(target):
        dirnames.sort()
        files += [
            os.path.join(dirpath, fn)
            for fn in sorted(fnames)
            if os.path.splitext(fn)[1].lower() in exts
        ]
    return files


def main(argv=None):
    p = argparse.ArgumentParser(
        description="Rewrite Doxygen doc comments in C/C++ sources as Markdown comments"
    )
    p.add_argument("path", help="Source file or directory")
    p.add_argument(
        "--ext",
        nargs="+",
        default=[".c", ".h", ".cpp", ".hpp"],
        help="Source extensions to scan (default: .c .h .cpp .hpp)",
    )
    p.add_argument("--dry-run", action="store_true", help="Report changes, write nothing")
    p.add_argument("--backup", action="store_true", help="Keep the original as <file>.bak")
    p.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 when any comment could not be converted",
    )
    args = p.parse_args(argv)

    if not os.path.exists(args.path):
        print(f"error: {args.path} not found", file=sys.stderr)
        sys.exit(1)
    exts = {e if e.startswith(".") else f".{e}" for e in args.ext}
    files = _collect_files(args.path, exts)

    changed = unconverted = 0
    for fpath in files:
        was_changed, problems = convert_file(fpath, dry_run=args.dry_run, backup=args.backup)
        unconverted += problems
        if was_changed:
            changed += 1
            print(f"{'would convert' if args.dry_run else 'converted'}: {fpath}")

    print(
        f"\n{changed}/{len(files)} files {'would be ' if args.dry_run else ''}modified, "
        f"{unconverted} comment(s) left unconverted"
    )
    if args.strict and unconverted:
        sys.exit(2)


if __name__ == "__main__":
    main()
