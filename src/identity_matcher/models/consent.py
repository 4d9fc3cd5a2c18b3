"""
Consentimientos OAuth.

Un ConsentGrant indica que un usuario autorizó a un cliente a ver sus
datos. Sin grant, el usuario es invisible para las consultas del cliente.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class ConsentGrant(BaseModel):
    """Relación (cliente, usuario) con los scopes otorgados."""

    client_id: str = Field(..., description="client_id OAuth (identificador público)")
    user_id: str = Field(..., description="Usuario que otorgó el acceso")
    scopes: list[str] = Field(default_factory=list)
    created_at: Optional[str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    updated_at: Optional[str] = None
