from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Product:
    id: int
    name: str
    description: str
    price: float
    image: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class UploadedImage:
    """Raw image payload received from a client, before it is stored."""

    filename: str
    content_type: str
    data: bytes
