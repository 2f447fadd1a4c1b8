"""Gopher menu parsing."""

from dataclasses import dataclass
from urllib.parse import quote

DEFAULT_PORT = 70

INFO = "i"
HTML = "h"
LINK_TYPES = frozenset("0123456789+gIsdTh;")


@dataclass
class MenuItem:
    type: str
    description: str
    selector: str = ""
    host: str = ""
    port: int = 0

    @property
    def is_link(self) -> bool:
        return self.type != INFO and bool(self.host)

    @property
    def url(self) -> str | None:
        """gopher:// URL for this item, with the item type leading the path."""
        if not self.is_link:
            return None
        if self.type == HTML and self.selector.startswith("URL:"):
            return self.selector[len("URL:"):]
        netloc = self.host if self.port == DEFAULT_PORT else f"{self.host}:{self.port}"
        return f"gopher://{netloc}/{self.type}{quote(self.selector, safe='/:@!$&()*+,;=?')}"


def _port(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return DEFAULT_PORT


def parse_item(line: str) -> MenuItem:
    item_type, rest = line[0], line[1:]
    fields = rest.split("\t")

    if item_type == INFO:
        return MenuItem(type=INFO, description=fields[0])

    if item_type in LINK_TYPES and len(fields) >= 3:
        # Description may itself contain tabs; the last three fields are fixed.
        return MenuItem(
            type=item_type,
            description="\t".join(fields[:-3]),
            selector=fields[-3],
            host=fields[-2],
            port=_port(fields[-1]),
        )

    return MenuItem(type=INFO, description=line)


def parse_menu(text: str) -> list[MenuItem]:
    """Parse a gophermap into items. Unrecognized lines become info lines."""
    items = []
    for line in text.replace("\r\n", "\n").split("\n"):
        if not line or line == ".":
            continue
        items.append(parse_item(line))
    return items
