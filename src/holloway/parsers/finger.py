"""Finger reply cleanup and line classification."""

import re
from dataclasses import dataclass
from enum import Enum

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
URL_PATTERN = re.compile(r"https?://\S+")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_ISO_TIMESTAMP = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2})?(\.\d+)?Z")
_STATUS_PREFIXES = ("Status:", "Online", "Offline", "Away")


class FingerLineType(str, Enum):
    TEXT = "text"
    LINK = "link"
    EMAIL = "email"
    TIMESTAMP = "timestamp"
    STATUS = "status"


@dataclass
class FingerLine:
    type: FingerLineType
    content: str
    url: str | None = None


def clean_finger_text(text: str) -> str:
    """Drop control characters and normalize line endings to LF."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return _CONTROL_CHARS.sub("", text)


def classify_line(line: str) -> FingerLine:
    stripped = line.strip()

    if match := EMAIL_PATTERN.search(stripped):
        return FingerLine(FingerLineType.EMAIL, line, url=f"mailto:{match.group(0)}")
    if match := URL_PATTERN.search(stripped):
        return FingerLine(FingerLineType.LINK, line, url=match.group(0))
    if _ISO_TIMESTAMP.search(stripped) or "GMT" in stripped or "UTC" in stripped:
        return FingerLine(FingerLineType.TIMESTAMP, line)
    if stripped.startswith(_STATUS_PREFIXES):
        return FingerLine(FingerLineType.STATUS, line)
    return FingerLine(FingerLineType.TEXT, line)


def parse_finger(text: str) -> list[FingerLine]:
    """Classify every non-blank line of a finger reply."""
    return [classify_line(line) for line in clean_finger_text(text).split("\n") if line.strip()]


def extract_urls(text: str) -> list[str]:
    return URL_PATTERN.findall(text)


def extract_emails(text: str) -> list[str]:
    return EMAIL_PATTERN.findall(text)
