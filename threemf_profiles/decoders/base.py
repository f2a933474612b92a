import logging
import re
from abc import ABC, abstractmethod
from itertools import chain
from typing import Iterable, Iterator

from iniconfig import IniConfig, ParseError, iscommentline

from ..models import DecoderStage, DecodeResult

logger = logging.getLogger(__name__)

_KEY = re.compile(r"\w+")
_KEY_VALUE_LINE = re.compile(r"^(\w+)\s*=\s*(.+)")
_ASSIGNMENT_LINE = re.compile(r"^\w+\s*=")

# Section header wrapped around headerless slicer configs for iniconfig
_SYNTHETIC_SECTION = "config"


class BaseDecoder(ABC):
    """A parser for one vendor's configuration serialization.

    ``decode`` never raises: a payload that cannot be parsed produces
    ``DecodeResult.empty`` carrying the reason.
    """

    @property
    @abstractmethod
    def stage(self) -> DecoderStage: ...

    @abstractmethod
    def decode(self, raw: bytes) -> DecodeResult: ...

    def _empty(self, reason: str) -> DecodeResult:
        logger.debug("%s decode failed: %s", self.stage.value, reason)
        return DecodeResult.empty(self.stage, reason)


def decode_text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").lstrip("\ufeff")


def _load_ini_config(text: str, label: str) -> IniConfig | None:
    """
    Load a headerless INI payload, or None when it is not plain ``key = value``.

    Lines are stripped first so indentation never turns into a value
    continuation. Any line that is not blank, a comment, or a ``key = value``
    assignment sends the payload to the line scanner instead.
    """
    lines = [line.strip() for line in text.splitlines()]
    for lineno, line in enumerate(lines, 1):
        if line and not iscommentline(line) and not _ASSIGNMENT_LINE.match(line):
            logger.debug(
                "Falling back to line scan for %s: line %d is not key = value", label, lineno
            )
            return None
    data = "\n".join(lines)
    try:
        return IniConfig(label, data=f"[{_SYNTHETIC_SECTION}]\n{data}")
    except ParseError as e:
        logger.debug("Falling back to line scan for %s: %s", label, e.msg)
        return None


def _scan_lines(text: str) -> Iterator[tuple[str, str]]:
    for line in text.splitlines():
        match = _KEY_VALUE_LINE.match(line.strip())
        if match:
            yield match.group(1), match.group(2).strip()


def iter_ini_pairs(text: str, label: str = "<config>") -> Iterator[tuple[str, str]]:
    """
    Yield ``(key, value)`` pairs from ``key = value`` slicer config text.

    iniconfig handles well-formed payloads. Anything it rejects (duplicate
    keys, stray non-INI lines) is scanned line by line instead. Either way
    only word-character keys with non-empty values are yielded.
    """
    config = _load_ini_config(text, label)
    if config is None:
        pairs: Iterable[tuple[str, str]] = _scan_lines(text)
    else:
        pairs = chain.from_iterable(section.items() for section in config)

    for key, value in pairs:
        value = value.strip()
        if value and _KEY.fullmatch(key):
            yield key, value
