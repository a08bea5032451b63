from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

# A parsed row. Keys missing from a short row are simply absent.
Record = Dict[str, str]


def _new_id() -> str:
    return str(uuid.uuid4())


class ConversionWarning(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    name: str = ""
    csv: str
    json_: List[Record] = Field(default_factory=list, alias="json")

    @property
    def records(self) -> List[Record]:
        return self.json_

    def dump(self) -> dict:
        return self.model_dump(by_alias=True)


class ConvertRequest(BaseModel):
    csv: str


class ConvertResponse(BaseModel):
    records: List[Record]
    json_text: str
    warnings: List[ConversionWarning] = Field(default_factory=list)
    entry: HistoryEntry


class FileConvertResponse(ConvertResponse):
    decoding: Dict[str, Any] = Field(default_factory=dict)


class RenameRequest(BaseModel):
    name: str


class CopyPart(str, Enum):
    csv = "csv"
    json = "json"


class CopyResponse(BaseModel):
    part: CopyPart
    text: str


class HistoryExport(BaseModel):
    count: int
    text: str


class HealthResponse(BaseModel):
    ok: bool = True
