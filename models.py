from pydantic import BaseModel, Field, field_validator
from typing import Optional

from rng.bigint import parse_literal
from rng.errors import ConversionError

class RangeIn(BaseModel):
    # decimal or 0x-prefixed hex; strings because maximum may run to 16^2048-1
    minimum: str = "0"
    maximum: str
    amount: int = Field(..., ge=0, description="how many samples to deliver")
    base: int = Field(10, ge=2, le=16, description="output base for the values")
    request_id: Optional[str] = Field(None, pattern=r"^[A-Za-z0-9_.-]{1,64}$")

    @field_validator("minimum", "maximum")
    @classmethod
    def _literal(cls, v: str) -> str:
        try:
            parse_literal(v)
        except ConversionError as e:
            raise ValueError(str(e)) from e
        return v

class SourceOut(BaseModel):
    type: str
    size: Optional[int] = None
    absMax: str
    perCallLimit: int

class RangeOut(BaseModel):
    request_id: str
    base: int
    values: list[str]
    delivered: str
    rejected: int
    calls: int
    source: SourceOut
    transcript_hex: str
