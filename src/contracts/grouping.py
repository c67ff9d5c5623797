from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class PositionedTextElement:
    text: str
    x: int
    y: int

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "x": self.x, "y": self.y}

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "PositionedTextElement":
        return PositionedTextElement(text=str(d.get("text", "")), x=int(d["x"]), y=int(d["y"]))


@dataclass(frozen=True, slots=True)
class Row:
    # `y` is the anchor of the row (y of the element that opened it).
    # Ordering rule: elements ascending by x; rows ascending by y.
    y: int
    elements: list[PositionedTextElement] = field(default_factory=list)

    def texts(self) -> list[str]:
        return [e.text for e in self.elements]

    def joined_text(self) -> str:
        return " ".join(self.texts())

    def to_dict(self) -> dict[str, Any]:
        return {"y": self.y, "elements": [e.to_dict() for e in self.elements]}

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Row":
        return Row(
            y=int(d["y"]),
            elements=[PositionedTextElement.from_dict(e) for e in (d.get("elements") or [])],
        )
