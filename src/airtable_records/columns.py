"""
Ready-made annotations for common Airtable column types.

Use them in record shapes like any other annotation:

    @dataclass
    class Main:
        name: Text = alias("Name", default="")
        when: Date = alias("When?", default="")
        attachments: Attachment = alias("Attachments", default_factory=list)
        formula: FormulaResult = alias("Formula", default_factory=FormulaResult)
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .errors import CoercionError

Text = str
LongText = str
Date = str          # ISO 8601, kept as sent
Checkbox = bool
Rating = int
Number = float
MultipleSelect = List[str]
RecordLink = List[str]  # linked record ids


@dataclass
class Thumbnail:
    url: str = ""
    width: int = 0
    height: int = 0


@dataclass
class Thumbnails:
    small: Thumbnail = field(default_factory=Thumbnail)
    large: Thumbnail = field(default_factory=Thumbnail)
    full: Thumbnail = field(default_factory=Thumbnail)


@dataclass
class AttachmentItem:
    id: str = ""
    url: str = ""
    filename: str = ""
    size: int = 0
    type: str = ""
    width: int = 0
    height: int = 0
    thumbnails: Thumbnails = field(default_factory=Thumbnails)


Attachment = List[AttachmentItem]


@dataclass
class FormulaResult:
    """
    A formula/rollup column: number, string, boolean, list, or an error object
    such as {"error": "#ERROR!"} / {"specialValue": "NaN"}.
    """
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "FormulaResult":
        if isinstance(raw, dict):
            if isinstance(raw.get("error"), str):
                return cls(error=raw["error"])
            if "specialValue" in raw:
                special = raw["specialValue"]
                if special in ("NaN", "Infinity", "-Infinity"):
                    return cls(value=float(special.replace("Infinity", "inf")))
                return cls(error=str(special))
            raise CoercionError("formula", "formula result", raw)
        return cls(value=raw)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def as_float(self) -> float:
        if isinstance(self.value, (int, float)) and not isinstance(self.value, bool):
            return float(self.value)
        raise ValueError(f"formula result is not a number: {self.value!r}")

    def as_str(self) -> str:
        if self.error is not None:
            return self.error
        if self.value is None:
            return ""
        if isinstance(self.value, list):
            return ", ".join(str(v) for v in self.value)
        return str(self.value)
