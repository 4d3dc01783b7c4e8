"""
École API — Class Schemas
==========================
"""

from typing import Optional, Union

from pydantic import BaseModel, Field

from ecole_api.schemas.common import RowId


class ClasseCreate(BaseModel):
    nom: str = Field(min_length=1)
    niveau: Optional[Union[int, str]] = None
    # Honoured for admins only; a teacher always owns the class they create
    enseignant_id: Optional[str] = None


class ClasseResponse(BaseModel):
    id: RowId
    nom: Optional[str] = None
    niveau: Optional[Union[int, str]] = None
    enseignant_id: Optional[str] = None


class EleveResponse(BaseModel):
    id: str
    nom: Optional[str] = None
    prenom: Optional[str] = None
    email: Optional[str] = None
