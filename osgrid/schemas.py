from typing import Optional

from pydantic import BaseModel, Field

# --- Grid reference schemas ---

class GridReferenceOut(BaseModel):
    grid_reference: str
    formatted: str
    digits: int
    easting: float
    northing: float
    latitude: float
    longitude: float


class GridLocationOut(BaseModel):
    grid_reference: str
    digits: int
    resolution_m: int
    easting: float
    northing: float
    latitude: float
    longitude: float


class ValidationOut(BaseModel):
    grid_reference: str
    valid: bool


# --- Location resolution ---

class ResolveLocationRequest(BaseModel):
    text: str = Field(min_length=1, max_length=2000)
    digits: Optional[int] = None


class ResolvedLocationOut(BaseModel):
    latitude: float
    longitude: float
    grid_reference: Optional[str] = None
    source: str

    model_config = {"from_attributes": True}
