"""
École API — Course Schemas
===========================

What:  Contracts for the teacher-scoped `/api/cours` routes.
Why:   `enseignant_id` is never accepted from the client: it is always the
       authenticated caller, set by CoursService.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ecole_api.schemas.common import RowId


class CoursCreate(BaseModel):
    classe_id: RowId
    titre: str = Field(min_length=1)
    description: Optional[str] = None
    fichier_url: Optional[str] = Field(default=None, description="Shareable Drive URL")


class CoursUpdate(BaseModel):
    classe_id: Optional[RowId] = None
    titre: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    fichier_url: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class CoursResponse(BaseModel):
    id: RowId
    titre: Optional[str] = None
    description: Optional[str] = None
    fichier_url: Optional[str] = None
    classe_id: Optional[RowId] = None
    enseignant_id: Optional[str] = None
    created_at: Optional[datetime] = None
    classe_nom: Optional[str] = Field(
        default=None, description="Name of the joined class (listing only)"
    )
