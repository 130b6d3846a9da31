"""Tag event stream over a legacy project document."""
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Tuple

from .exceptions import CorruptedFileError, UnsupportedFormatError

logger = logging.getLogger(__name__)

OPEN = "open"
CLOSE = "close"

PRE_1_0_HEADER = b"AudacityProject"

PRE_1_0_MESSAGE = (
    "This project was saved by Audacity version 1.0 or earlier. The format has\n"
    "changed and this version of Audacity is unable to import the project.\n\n"
    "Use a version of Audacity prior to v3.0.0 to upgrade the project and then\n"
    "you may import it with this version of Audacity."
)


@dataclass
class TagEvent:
    """Start or end of one tag."""
    kind: str
    name: str
    attrs: List[Tuple[str, str]] = field(default_factory=list)


def _local_name(name: str) -> str:
    """Strip an ``{namespace}`` prefix."""
    return name.rsplit("}", 1)[-1] if name.startswith("{") else name


def iter_tag_events(file_path: Path) -> Iterator[TagEvent]:
    """
    Yield open/close events for every tag in the document, in order.

    Raises:
        CorruptedFileError: If the document is not well-formed XML
    """
    try:
        for event, elem in ET.iterparse(str(file_path), events=("start", "end")):
            name = _local_name(elem.tag)
            if event == "start":
                attrs = [(_local_name(k), v) for k, v in elem.attrib.items()]
                yield TagEvent(OPEN, name, attrs)
            else:
                yield TagEvent(CLOSE, name)
                elem.clear()
    except ET.ParseError as e:
        raise CorruptedFileError(str(e), str(file_path)) from e


def looks_like_legacy_project(file_path: Path, probe_bytes: int = 256) -> bool:
    """
    Check whether ``file_path`` is a legacy XML project.

    Returns:
        True for an XML document whose root is ``project`` or
        ``audacityproject``

    Raises:
        UnsupportedFormatError: For projects saved by version 1.0 or earlier
    """
    try:
        with open(file_path, 'rb') as f:
            head = f.read(probe_bytes)
    except OSError as e:
        logger.debug(f"Cannot read {file_path}: {e}")
        return False

    if head.startswith(PRE_1_0_HEADER):
        raise UnsupportedFormatError(PRE_1_0_MESSAGE, str(file_path))

    return head.startswith(b"<?xml") and (
        b"<audacityproject" in head or b"<project" in head
    )
