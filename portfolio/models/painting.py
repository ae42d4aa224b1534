from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

MIN_YEAR = 1900
MAX_YEAR = 2030


class Availability(str, Enum):
    AVAILABLE = "available"
    SOLD = "sold"
    NOT_FOR_SALE = "not-for-sale"


class PaintingBase(BaseModel):
    """Champs saisis dans le formulaire d'ajout d'une œuvre"""
    title: str
    year: int
    medium: str
    size: str  # texte libre, ex: "80 × 100 cm"
    description: Optional[str] = None
    availability: Availability = Availability.AVAILABLE
    tags: Optional[str] = None  # séparés par des virgules
    featured: bool = False


class Painting(PaintingBase):
    id: str
    image_url: str = Field(..., alias="imageUrl")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    class Config:
        populate_by_name = True
