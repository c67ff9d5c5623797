from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Frame:
    """
    Element frame as reported by the recognizer (top-left origin, pixels).
    """

    left: int
    top: int
    width: int
    height: int

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Frame":
        return Frame(
            left=int(d.get("left") or 0),
            top=int(d.get("top") or 0),
            width=int(d.get("width") or 0),
            height=int(d.get("height") or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"left": self.left, "top": self.top, "width": self.width, "height": self.height}


@dataclass(frozen=True, slots=True)
class RecognizedElement:
    # `text` is exactly as recognized (no correction at this boundary).
    text: str
    frame: Frame | None

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RecognizedElement":
        frame_raw = d.get("frame")
        return RecognizedElement(
            text=str(d.get("text", "")),
            frame=(None if frame_raw is None else Frame.from_dict(frame_raw)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "frame": None if self.frame is None else self.frame.to_dict()}


@dataclass(frozen=True, slots=True)
class RecognizedLine:
    elements: list[RecognizedElement]

    @property
    def text(self) -> str:
        return " ".join(e.text for e in self.elements)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RecognizedLine":
        elements_raw = d.get("elements") or []
        if not isinstance(elements_raw, list):
            raise TypeError("RecognizedLine.elements must be a list")
        return RecognizedLine(elements=[RecognizedElement.from_dict(e) for e in elements_raw])

    def to_dict(self) -> dict[str, Any]:
        return {"elements": [e.to_dict() for e in self.elements]}


@dataclass(frozen=True, slots=True)
class RecognizedBlock:
    lines: list[RecognizedLine]

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RecognizedBlock":
        lines_raw = d.get("lines") or []
        if not isinstance(lines_raw, list):
            raise TypeError("RecognizedBlock.lines must be a list")
        return RecognizedBlock(lines=[RecognizedLine.from_dict(x) for x in lines_raw])

    def to_dict(self) -> dict[str, Any]:
        return {"lines": [l.to_dict() for l in self.lines]}


@dataclass(frozen=True, slots=True)
class RecognitionResult:
    """
    Recognizer output for one image: full text plus the block/line/element tree.
    """

    text: str
    blocks: list[RecognizedBlock]

    def element_count(self) -> int:
        return sum(len(ln.elements) for b in self.blocks for ln in b.lines)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RecognitionResult":
        blocks_raw = d.get("blocks") or []
        if not isinstance(blocks_raw, list):
            raise TypeError("RecognitionResult.blocks must be a list")
        return RecognitionResult(
            text=str(d.get("text", "")),
            blocks=[RecognizedBlock.from_dict(b) for b in blocks_raw],
        )

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "blocks": [b.to_dict() for b in self.blocks]}
