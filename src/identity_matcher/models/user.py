"""
Datos demográficos del usuario que usa el matching.

La identidad (login, sesiones, tokens) vive en el proveedor de auth;
acá sólo importan género, fecha de nacimiento y ubicación.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from identity_matcher.models.match import GeoPoint


class User(BaseModel):
    """Usuario tal como lo ve el motor de matching."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="ID del usuario en el proveedor de auth")
    gender: Optional[str] = None
    birthdate: Optional[date] = None

    # Ubicación (la actualizan las apps cliente)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    location_updated_at: Optional[str] = None

    @property
    def location(self) -> Optional[GeoPoint]:
        if self.latitude is None or self.longitude is None:
            return None
        return GeoPoint(self.latitude, self.longitude)
