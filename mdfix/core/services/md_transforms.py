"""
Markdown transforms — the ordered rewrite pipeline behind ``mdfix``.

Each rule is a pure ``str -> str`` function aimed at one markdownlint
rule.  ``transform()`` runs them in a fixed order over the whole
document; every rule re-scans the full text, so later rules see (and may
re-match) what earlier rules produced.

Two kinds of region are protected from the rules that rewrite prose:
  - YAML front matter at the very top of the file
  - fenced code blocks (``` ... ```)

Nothing else is parsed.  There is no AST — only line-level regex work.
"""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

DEFAULT_FENCE_LANGUAGE = "text"


# ── Rule model ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class RewriteRule:
    """One step of the pipeline: a pattern plus its replacement policy."""

    name: str
    code: str
    description: str
    apply: Callable[[str], str]

    def to_dict(self) -> dict:
        return {"name": self.name, "code": self.code, "description": self.description}


# ── Protected regions ───────────────────────────────────────────────

_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\n(?:.*?\n)?---[ \t]*(?:\n|\Z)", re.DOTALL)
_FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(?P<ticks>`{3,})(?P<info>[^`\n]*)$")
_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+")


def _split_front_matter(text: str) -> tuple[str, str]:
    """Return ``(front_matter, body)``; front matter is ``""`` when absent."""
    m = _FRONT_MATTER_RE.match(text)
    if not m:
        return "", text
    return text[: m.end()], text[m.end():]


def _fence_events(lines: list[str]) -> dict[int, str]:
    """Map line index → ``"open"`` / ``"close"`` for every fence boundary.

    A fence closes on a bare run of at least as many backticks as opened
    it.  An unclosed fence simply never gets a ``"close"`` event.
    """
    events: dict[int, str] = {}
    open_ticks = 0
    for i, line in enumerate(lines):
        m = _FENCE_RE.match(line)
        if not m:
            continue
        ticks = len(m.group("ticks"))
        if not open_ticks:
            events[i] = "open"
            open_ticks = ticks
        elif ticks >= open_ticks and not m.group("info").strip():
            events[i] = "close"
            open_ticks = 0
    return events


def _segments(text: str) -> list[tuple[str, bool]]:
    """Split *text* into ``(chunk, protected)`` pairs.

    Joining the chunks gives back *text* exactly.  Prose chunks always
    start at a line boundary.
    """
    front_matter, body = _split_front_matter(text)
    segments: list[tuple[str, bool]] = []
    if front_matter:
        segments.append((front_matter, True))

    lines = _LINE_RE.findall(body)
    events = _fence_events([line.rstrip("\n") for line in lines])

    prose: list[str] = []
    code: list[str] = []
    in_fence = False
    for i, line in enumerate(lines):
        kind = events.get(i)
        if kind == "open":
            if prose:
                segments.append(("".join(prose), False))
                prose = []
            in_fence = True

        (code if in_fence else prose).append(line)

        if kind == "close":
            segments.append(("".join(code), True))
            code = []
            in_fence = False

    if code:
        segments.append(("".join(code), True))
    if prose:
        segments.append(("".join(prose), False))
    return segments


def prose_only(func: Callable[[str], str]) -> Callable[[str], str]:
    """Apply *func* to the text outside front matter and fenced code."""

    @functools.wraps(func)
    def wrapper(text: str) -> str:
        return "".join(
            chunk if protected else func(chunk)
            for chunk, protected in _segments(text)
        )

    return wrapper


def _is_blank(line: str) -> bool:
    return not line.strip()


# ── 1. Blank-line runs (MD012) ──────────────────────────────────────

_BLANK_RUN_RE = re.compile(r"\n(?:[ \t]*\n){2,}")


def collapse_blank_runs(text: str) -> str:
    """Collapse 3+ consecutive line breaks into a single blank line."""
    return _BLANK_RUN_RE.sub("\n\n", text)


# ── 2. Blockquote gaps (MD028) ──────────────────────────────────────

_QUOTE_GAP_RE = re.compile(r"^(>[^\n]*\n)(?:[ \t]*\n)+(?=>)", re.MULTILINE)


@prose_only
def merge_blockquotes(text: str) -> str:
    """Drop blank lines between two quoted lines."""
    return _QUOTE_GAP_RE.sub(r"\1", text)


# ── 3/4. Blank lines around headings and lists (MD022, MD032) ───────

_HEADING = r"#+[ \t]"
_BULLET_ITEM = r"[ \t]*[-*+][ \t]"
_ORDERED_ITEM = r"[ \t]*\d+\.[ \t]"


def _padding_patterns(line: str, *, block: bool) -> tuple[re.Pattern, re.Pattern]:
    """Build the (before, after) patterns that pad lines starting with *line*.

    With ``block=True``, consecutive matching lines count as one block and
    are not separated from each other.
    """
    guard = f"(?!{line})" if block else ""
    before = re.compile(
        rf"^{guard}([^\n]*\S[^\n]*)\n(?={line})",
        re.MULTILINE,
    )
    after = re.compile(
        rf"^({line}[^\n]*)\n{guard}(?=[^\n]*\S)",
        re.MULTILINE,
    )
    return before, after


def _pad(text: str, patterns: tuple[re.Pattern, re.Pattern]) -> str:
    before, after = patterns
    text = before.sub(r"\1\n\n", text)
    return after.sub(r"\1\n\n", text)


_HEADING_PADDING = _padding_patterns(_HEADING, block=False)
_BULLET_PADDING = _padding_patterns(_BULLET_ITEM, block=True)
_ORDERED_PADDING = _padding_patterns(_ORDERED_ITEM, block=True)


@prose_only
def pad_headings(text: str) -> str:
    """Ensure a blank line before and after every ATX heading."""
    return _pad(text, _HEADING_PADDING)


@prose_only
def pad_lists(text: str) -> str:
    """Ensure blank lines around bullet blocks and ordered blocks.

    The two list kinds are handled independently: a bullet line directly
    after an ordered line is padded like any other boundary.
    """
    text = _pad(text, _BULLET_PADDING)
    return _pad(text, _ORDERED_PADDING)


# ── 5. Blank lines around fences (MD031) ────────────────────────────


def pad_fences(text: str) -> str:
    """Blank line before opening fences and after closing fences."""
    front_matter, body = _split_front_matter(text)
    lines = body.split("\n")
    events = _fence_events(lines)

    out: list[str] = []
    for i, line in enumerate(lines):
        kind = events.get(i)
        if kind == "open" and out and not _is_blank(out[-1]):
            out.append("")
        out.append(line)
        if kind == "close" and i + 1 < len(lines) and not _is_blank(lines[i + 1]):
            out.append("")
    return front_matter + "\n".join(out)


# ── 6. Trailing whitespace (MD009) ──────────────────────────────────

_TRAILING_WS_RE = re.compile(r"[ \t]+$", re.MULTILINE)


def strip_trailing_whitespace(text: str) -> str:
    return _TRAILING_WS_RE.sub("", text)


# ── 7. Fence language (MD040) ───────────────────────────────────────


def tag_bare_fences(text: str) -> str:
    """Give every opening fence without an info string the ``text`` language."""
    front_matter, body = _split_front_matter(text)
    lines = body.split("\n")
    for i, kind in _fence_events(lines).items():
        if kind != "open":
            continue
        m = _FENCE_RE.match(lines[i])
        if m and not m.group("info").strip():
            lines[i] = f"{m.group('indent')}{m.group('ticks')}{DEFAULT_FENCE_LANGUAGE}"
    return front_matter + "\n".join(lines)


# ── 8. Heading style (MD003) ────────────────────────────────────────

_SETEXT_RE = re.compile(
    r"^(?P<text>[^\n]*\S[^\n]*)\n(?P<bar>=+|-{2,})[ \t]*(?P<tail>\n|\Z)",
    re.MULTILINE,
)
# Lines that can't be the body of a single-line setext heading.
_NOT_PARAGRAPH_RE = re.compile(
    r"^(?: {4}|\t|[ \t]*(?:[-*+][ \t]|\d+\.[ \t]|>|#|\||<|```))"
)
_CLOSING_HASHES_RE = re.compile(
    r"^(#+[ \t][^\n]*?)[ \t]+#+(?=[ \t]*[.,;:!]*[ \t]*$)",
    re.MULTILINE,
)


def _setext_to_atx(m: re.Match) -> str:
    source = m.string
    title = m.group("text")
    start = m.start()

    previous_line = source[: max(start - 1, 0)].rpartition("\n")[2]
    if (
        _NOT_PARAGRAPH_RE.match(title)
        or set(title.strip()) <= set("-=*_ ")
        or (start and not _is_blank(previous_line))
    ):
        return m.group(0)

    hashes = "#" if m.group("bar").startswith("=") else "##"
    tail = m.group("tail")
    next_line = source[m.end():].split("\n", 1)[0]
    if tail and not _is_blank(next_line):
        tail += "\n"
    return f"{hashes} {title.strip()}{tail}"


@prose_only
def normalize_heading_style(text: str) -> str:
    """Convert setext headings to ATX and drop closing hash sequences.

    Only single-line paragraphs (blank line or start of text above) are
    converted; anything else under an underline is left untouched.
    """
    # A converted heading frees the next underline in a run, so repeat
    while True:
        converted = _SETEXT_RE.sub(_setext_to_atx, text)
        if converted == text:
            break
        text = converted
    return _CLOSING_HASHES_RE.sub(r"\1", text)


# ── 9. Heading hash spacing (MD019) ─────────────────────────────────

_HASH_SPACING_RE = re.compile(r"^(#+)[ \t]+", re.MULTILINE)


@prose_only
def normalize_hash_spacing(text: str) -> str:
    return _HASH_SPACING_RE.sub(r"\1 ", text)


# ── 10. List indentation (MD007) ────────────────────────────────────

_INDENTED_BULLET_RE = re.compile(r"^([ \t]+)(?=[-*+][ \t])", re.MULTILINE)


def _round_indent(m: re.Match) -> str:
    width = len(m.group(1))
    return " " * (width + width % 2)


@prose_only
def normalize_list_indent(text: str) -> str:
    """Round indented bullet markers up to a multiple of two spaces."""
    return _INDENTED_BULLET_RE.sub(_round_indent, text)


# ── 11. Ordered list prefixes (MD029) ───────────────────────────────

_ORDERED_MARKER_RE = re.compile(r"^([ \t]*)\d+\.(?=[ \t])", re.MULTILINE)


@prose_only
def normalize_ordered_prefixes(text: str) -> str:
    """Renumber every ordered item to ``1.`` and let the renderer count."""
    return _ORDERED_MARKER_RE.sub(r"\g<1>1.", text)


# ── 12. Bare URLs (MD034) ───────────────────────────────────────────

_URL_OR_CODE_RE = re.compile(
    r"(?P<code>`[^`\n]*`)"
    r"|(?P<link>\[[^\[\]\n]*\])"
    r"|(?<![\[(<`\"'=])(?P<url>https?://[^\s<>\[\]()`\"'*]+)"
)
_URL_TRAILING_PUNCT = ".,;:!?"


def _wrap_url(m: re.Match) -> str:
    url = m.group("url")
    if url is None:
        return m.group(0)
    # Link text or link target: [http://x] / (http://x)
    if m.string[m.end(): m.end() + 1] in ("]", ")"):
        return url
    trailing = _URL_TRAILING_PUNCT
    # _http://x.io_ is emphasis, not part of the URL
    if m.string[m.start("url") - 1: m.start("url")] == "_":
        trailing += "_"
    bare = url.rstrip(trailing)
    if bare.endswith("//"):
        return url
    return f"<{bare}>{url[len(bare):]}"


@prose_only
def wrap_bare_urls(text: str) -> str:
    """Wrap bare http(s) URLs in angle brackets.

    Inline code spans, link text in ``[...]``, markup-wrapped URLs and
    HTML attribute values are left alone.
    """
    return _URL_OR_CODE_RE.sub(_wrap_url, text)


# ── 13. Heading punctuation (MD026) ─────────────────────────────────

_HEADING_PUNCT_RE = re.compile(
    r"^(#+[ \t]+[^\n]*?\S)[ \t]*[.,;:!]+[ \t]*$",
    re.MULTILINE,
)


@prose_only
def strip_heading_punctuation(text: str) -> str:
    return _HEADING_PUNCT_RE.sub(r"\1", text)


# ── 14. File ending (MD047) ─────────────────────────────────────────


def normalize_file_ending(text: str) -> str:
    """Exactly one trailing line break, even for an empty document."""
    return text.rstrip("\n") + "\n"


# ── Pipeline ────────────────────────────────────────────────────────

RULES: tuple[RewriteRule, ...] = (
    RewriteRule(
        "collapse-blank-runs", "MD012",
        "Collapse runs of blank lines into one", collapse_blank_runs,
    ),
    RewriteRule(
        "merge-blockquotes", "MD028",
        "Remove blank lines inside blockquotes", merge_blockquotes,
    ),
    RewriteRule(
        "blanks-around-headings", "MD022",
        "Surround headings with blank lines", pad_headings,
    ),
    RewriteRule(
        "blanks-around-lists", "MD032",
        "Surround list blocks with blank lines", pad_lists,
    ),
    RewriteRule(
        "blanks-around-fences", "MD031",
        "Surround fenced code blocks with blank lines", pad_fences,
    ),
    RewriteRule(
        "strip-trailing-whitespace", "MD009",
        "Remove trailing spaces and tabs", strip_trailing_whitespace,
    ),
    RewriteRule(
        "default-fence-language", "MD040",
        f"Tag bare opening fences as '{DEFAULT_FENCE_LANGUAGE}'", tag_bare_fences,
    ),
    RewriteRule(
        "heading-style", "MD003",
        "Convert setext headings to ATX, drop closing hashes", normalize_heading_style,
    ),
    RewriteRule(
        "heading-hash-spacing", "MD019",
        "Single space after heading hashes", normalize_hash_spacing,
    ),
    RewriteRule(
        "list-indent", "MD007",
        "Indent nested bullets in steps of two spaces", normalize_list_indent,
    ),
    RewriteRule(
        "ordered-list-prefix", "MD029",
        "Renumber ordered list items to '1.'", normalize_ordered_prefixes,
    ),
    RewriteRule(
        "wrap-bare-urls", "MD034",
        "Wrap bare URLs in angle brackets", wrap_bare_urls,
    ),
    RewriteRule(
        "heading-punctuation", "MD026",
        "Strip trailing punctuation from headings", strip_heading_punctuation,
    ),
    RewriteRule(
        "single-trailing-newline", "MD047",
        "End the file with exactly one line break", normalize_file_ending,
    ),
)


def rule_names() -> list[str]:
    """Names of all rules, in pipeline order."""
    return [rule.name for rule in RULES]


def transform(content: str, disabled: Iterable[str] = ()) -> str:
    """Run the pipeline over *content* and return the rewritten text.

    Args:
        content: Full document text.
        disabled: Rule names to skip.  The remaining order is unchanged.

    Returns:
        The rewritten document.  Never raises for ``str`` input.
    """
    skip = set(disabled)
    for rule in RULES:
        if rule.name in skip:
            logger.debug("Skipping disabled rule %s", rule.name)
            continue
        content = rule.apply(content)
    return content
