"""
Comment syntax and text escaping for generated artifacts.

Caller-supplied text (feature descriptions, roles, insight bullets) is
embedded in comments and literals of many languages. Each helper here makes
that text unable to terminate the surrounding construct.

codeintel/src/codeintel/comments.py
"""

import html
import json
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

__all__ = [
    "CommentStyle",
    "SQL",
    "HASH",
    "SLASH",
    "BLOCK",
    "HTML",
    "single_line",
    "comment_line",
    "comment_block",
    "has_comment_line",
    "append_comment_block",
    "header_block",
    "html_text",
    "js_string",
    "py_string",
    "sql_string",
    "swift_string",
    "interpolating_string",
    "identifier",
    "snake_identifier",
]

_NEWLINES = re.compile(r"[\r\n\u2028\u2029]+")


@dataclass(frozen=True)
class CommentStyle:
    """How a language writes comments. Block styles set `close`."""

    name: str
    open: str
    close: Optional[str] = None

    def escape(self, text: str) -> str:
        text = single_line(text)
        if self.close == "*/":
            text = text.replace("*/", "* /")
        elif self.close == "-->":
            while "--" in text:
                text = text.replace("--", "- -")
            text = text.replace(">", "&gt;")
        return text


SQL = CommentStyle("sql", "--")
HASH = CommentStyle("hash", "#")
SLASH = CommentStyle("slash", "//")
BLOCK = CommentStyle("block", "/*", "*/")
HTML = CommentStyle("html", "<!--", "-->")


def single_line(text: str) -> str:
    """Collapse line breaks so the text stays on one line."""
    return _NEWLINES.sub(" ", str(text)).strip()


def comment_line(text: str, style: CommentStyle) -> str:
    escaped = style.escape(text)
    if style.close:
        return f"{style.open} {escaped} {style.close}"
    return f"{style.open} {escaped}".rstrip()


def comment_block(lines: Iterable[str], style: CommentStyle) -> str:
    return "\n".join(comment_line(line, style) for line in lines)


def has_comment_line(code: str, text: str, style: CommentStyle) -> bool:
    return comment_line(text, style) in code


def append_comment_block(code: str, lines: List[str], style: CommentStyle) -> str:
    """Append comment lines that are not already present.

    Returns the code unchanged when every line already exists.
    """
    missing = [line for line in lines if not has_comment_line(code, line, style)]
    if not missing:
        return code
    return code.rstrip("\n") + "\n\n" + comment_block(missing, style) + "\n"


def header_block(
    style: CommentStyle,
    feature: str,
    engine_name: str,
    technology: str,
    role: Optional[str],
) -> str:
    return comment_block(
        [
            feature,
            f"Generated by {engine_name}",
            f"Technology: {technology}",
            f"Role: {role or 'developer'}",
        ],
        style,
    )


def html_text(text: str) -> str:
    return html.escape(single_line(text), quote=True)


def js_string(text: str) -> str:
    """Double-quoted literal valid in JavaScript, TypeScript, Java, C# and Go."""
    return json.dumps(str(text)).replace("</", "<\\/")


def py_string(text: str) -> str:
    return repr(str(text))


def sql_string(text: str) -> str:
    return "'" + str(text).replace("'", "''") + "'"


def swift_string(text: str) -> str:
    out = []
    for ch in str(text):
        if ch in "\"\\":
            out.append("\\" + ch)
        elif ord(ch) < 0x20:
            out.append("\\u{%x}" % ord(ch))
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def interpolating_string(text: str) -> str:
    """Double-quoted literal for Kotlin and Dart, with $ escaped."""
    out = []
    for ch in str(text):
        if ch in "\"\\$":
            out.append("\\" + ch)
        elif ord(ch) < 0x20:
            out.append("\\u%04x" % ord(ch))
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def identifier(text: str, default: str = "Feature", suffix: str = "") -> str:
    """PascalCase identifier built from the words of the text."""
    words = [w for w in re.findall(r"[A-Za-z0-9]+", str(text)) if len(w) > 2]
    name = "".join(w[:1].upper() + w[1:].lower() for w in words[:4])
    if not name:
        name = default
    elif not name[0].isalpha():
        name = default + name
    return name + suffix


def snake_identifier(text: str, default: str = "entities") -> str:
    """snake_case identifier built from the words of the text."""
    words = [w.lower() for w in re.findall(r"[A-Za-z0-9]+", str(text)) if len(w) > 2]
    name = "_".join(words[:3])
    if not name:
        return default
    if not name[0].isalpha():
        name = f"{default}_{name}"
    return name[:48]
