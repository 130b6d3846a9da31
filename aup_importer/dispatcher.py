"""Stack-based tag dispatcher for the legacy project vocabulary.

Each open tag pushes a ``TagFrame`` recording the parent tag, the tag itself
and the entity that owns the tag's children. The rule that builds the owner
is chosen by tag kind; rules see the parent frame, which is how the same tag
name takes a different meaning under different parents.

A rule may return ``BYPASS`` to drop a whole subtree. Tags under a bypassed
frame are still checked against the vocabulary, but no rule runs for them and
their owner is always None.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .diagnostics import ImportDiagnostics
from .exceptions import AUPImportError, UnrecognizedTagError
from .models import Attributes, TagHandler

logger = logging.getLogger(__name__)


class TagKind(Enum):
    """The fixed set of tags a legacy project may contain."""
    PROJECT = "project"
    LABELTRACK = "labeltrack"
    NOTETRACK = "notetrack"
    TIMETRACK = "timetrack"
    WAVETRACK = "wavetrack"
    TAGS = "tags"
    TAG = "tag"
    LABEL = "label"
    WAVECLIP = "waveclip"
    SEQUENCE = "sequence"
    WAVEBLOCK = "waveblock"
    ENVELOPE = "envelope"
    CONTROLPOINT = "controlpoint"
    SIMPLEBLOCKFILE = "simpleblockfile"
    SILENTBLOCKFILE = "silentblockfile"
    PCMALIASBLOCKFILE = "pcmaliasblockfile"

    @classmethod
    def from_name(cls, name: str) -> "TagKind":
        if name == "audacityproject":
            return cls.PROJECT
        try:
            return cls(name)
        except ValueError:
            raise UnrecognizedTagError(name)


class _Bypass:
    def __repr__(self):
        return "BYPASS"


BYPASS = _Bypass()


@dataclass
class TagFrame:
    """One open tag on the dispatcher stack."""
    parent: str
    tag: str
    kind: TagKind
    owner: Optional[TagHandler] = None
    bypassed: bool = False


class TagDispatcher:
    """Routes tokenizer events to tag rules and keeps the nesting stack."""

    def __init__(self, builder, diagnostics: ImportDiagnostics):
        """
        Initialize dispatcher.

        Args:
            builder: Object exposing ``rule_for(kind)`` and ``tag_closed(frame)``
            diagnostics: Accumulator that receives the fatal error, if any
        """
        self.builder = builder
        self.diagnostics = diagnostics
        self.stack: List[TagFrame] = []
        self.parent_tag = ""
        self.current_tag = ""

    @property
    def depth(self) -> int:
        return len(self.stack)

    @property
    def top(self) -> Optional[TagFrame]:
        return self.stack[-1] if self.stack else None

    def open_tag(self, name: str, attrs: Attributes) -> bool:
        """
        Handle a start tag.

        Returns:
            False once a fatal error has been recorded; parsing must stop
        """
        if self.diagnostics.failed:
            return False

        self.parent_tag = self.current_tag
        self.current_tag = name
        parent = self.top

        try:
            frame = self._build_frame(name, attrs, parent)
        except AUPImportError as e:
            logger.debug(f"Rejected <{name}> under <{self.parent_tag}>: {e.message}")
            self.diagnostics.set_error(e.message)
            return False

        self.stack.append(frame)
        return True

    def _build_frame(self, name: str, attrs: Attributes, parent: Optional[TagFrame]) -> TagFrame:
        kind = TagKind.from_name(name)

        if parent is not None and parent.bypassed:
            return TagFrame(self.parent_tag, name, kind, owner=None, bypassed=True)

        owner = self.builder.rule_for(kind)(attrs, parent)
        if owner is BYPASS:
            logger.debug(f"Bypassing <{name}> subtree")
            return TagFrame(self.parent_tag, name, kind, owner=None, bypassed=True)

        if owner is not None and not owner.handle_tag(name, attrs):
            raise UnrecognizedTagError(name, self.parent_tag)

        return TagFrame(self.parent_tag, name, kind, owner=owner)

    def close_tag(self, name: str) -> bool:
        """Handle an end tag; the frame's owner is notified before popping."""
        if self.diagnostics.failed:
            return False

        if not self.stack or self.stack[-1].tag != name:
            self.diagnostics.set_error(f"Unexpected closing tag </{name}>")
            return False

        frame = self.stack.pop()
        if frame.owner is not None:
            frame.owner.handle_end_tag(name)
        self.builder.tag_closed(frame)

        if self.stack:
            self.parent_tag = self.stack[-1].parent
            self.current_tag = self.stack[-1].tag
        else:
            self.parent_tag = ""
            self.current_tag = ""
        return True
