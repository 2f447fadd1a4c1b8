"""Gemtext line parsing."""

import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urljoin, urlsplit, urlunsplit


class LineType(str, Enum):
    TEXT = "text"
    LINK = "link"
    HEADING = "heading"
    LIST_ITEM = "list_item"
    QUOTE = "quote"


class LinkType(str, Enum):
    GEMINI = "gemini"
    GOPHER = "gopher"
    FINGER = "finger"
    HTTP = "http"
    HTTPS = "https"
    EMAIL = "email"
    XMPP = "xmpp"
    IRC = "irc"
    RELATIVE = "relative"
    UNKNOWN = "unknown"


_LINK_PREFIXES = [
    ("gemini://", LinkType.GEMINI),
    ("gopher://", LinkType.GOPHER),
    ("finger://", LinkType.FINGER),
    ("http://", LinkType.HTTP),
    ("https://", LinkType.HTTPS),
    ("mailto:", LinkType.EMAIL),
    ("xmpp:", LinkType.XMPP),
    ("irc:", LinkType.IRC),
]

_HAS_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_STATUS_PREFIX = re.compile(r"\AStatus: [^\n]*\nMeta: [^\n]*\n\n")


@dataclass
class GemtextLine:
    type: LineType
    content: str
    url: str | None = None
    label: str | None = None
    level: int | None = None
    link_type: LinkType | None = None

    @property
    def text(self) -> str:
        """Content without its line-type marker."""
        stripped = self.content.strip()
        if self.type == LineType.HEADING:
            return stripped[self.level:].strip()
        if self.type == LineType.LIST_ITEM:
            return stripped[2:].strip()
        if self.type == LineType.QUOTE:
            return stripped[1:].strip()
        if self.type == LineType.LINK:
            return self.label or self.url or ""
        return self.content


def classify_link(url: str) -> LinkType:
    for prefix, link_type in _LINK_PREFIXES:
        if url.startswith(prefix):
            return link_type
    if "://" not in url and not _HAS_SCHEME.match(url):
        return LinkType.RELATIVE
    return LinkType.UNKNOWN


def resolve_url(base_url: str, ref: str) -> str:
    """Resolve ``ref`` against ``base_url``.

    urljoin ignores schemes it does not know, so the join is done under
    http and the original scheme is put back.
    """
    if ref.startswith("://"):
        ref = "gemini" + ref
    if _HAS_SCHEME.match(ref):
        return ref
    base = urlsplit(base_url)
    joined = urlsplit(urljoin(urlunsplit(base._replace(scheme="http")), ref))
    return urlunsplit(joined._replace(scheme=base.scheme))


def _parse_link(line: str, base_url: str | None) -> GemtextLine:
    parts = line.strip()[2:].split(maxsplit=1)
    if not parts:
        return GemtextLine(type=LineType.TEXT, content=line)

    url = parts[0]
    link_type = classify_link(url)
    if base_url and link_type == LinkType.RELATIVE:
        url = resolve_url(base_url, url)
    label = " ".join(parts[1].split()) if len(parts) > 1 else url
    return GemtextLine(type=LineType.LINK, content=line, url=url, label=label, link_type=link_type)


def parse_line(line: str, base_url: str | None = None) -> GemtextLine:
    """Classify one line outside preformatted mode."""
    stripped = line.strip()
    if stripped.startswith("=>"):
        return _parse_link(line, base_url)
    if stripped.startswith("#"):
        level = len(stripped) - len(stripped.lstrip("#"))
        return GemtextLine(type=LineType.HEADING, content=line, level=min(level, 3))
    if stripped.startswith("* "):
        return GemtextLine(type=LineType.LIST_ITEM, content=line)
    if stripped.startswith(">"):
        return GemtextLine(type=LineType.QUOTE, content=line)
    return GemtextLine(type=LineType.TEXT, content=line)


def parse_gemtext(text: str, base_url: str | None = None) -> list[GemtextLine]:
    """Parse a gemtext document.

    Lines between ``` toggles are kept verbatim as text; the toggle lines
    themselves are dropped.
    """
    lines = []
    preformatted = False

    for line in text.splitlines():
        if line.strip().startswith("```"):
            preformatted = not preformatted
            continue
        if preformatted:
            lines.append(GemtextLine(type=LineType.TEXT, content=line))
        else:
            lines.append(parse_line(line, base_url))

    return lines


def split_status_prefix(text: str) -> tuple[str | None, str | None, str]:
    """Split navigate() output for Gemini into (status, meta, body)."""
    match = _STATUS_PREFIX.match(text)
    if not match:
        return None, None, text
    header = match.group(0).splitlines()
    return header[0][len("Status: "):], header[1][len("Meta: "):], text[match.end():]


def extract_links(text: str, base_url: str | None = None) -> list[GemtextLine]:
    return [line for line in parse_gemtext(text, base_url) if line.type == LineType.LINK]
