"""
École API — User Management Schemas
====================================

What:  Contracts for the admin-only `/api/users` routes.
Why:   Passwords are accepted on create but never echoed back or written to
       the audit trail; updates are partial (only sent fields change).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ecole_api.models.identity import Role
from ecole_api.schemas.common import RowId


class UserCreate(BaseModel):
    nom: str = Field(min_length=1)
    prenom: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=6)
    role: Role
    matieres: Optional[List[str]] = Field(default=None, description="Subjects taught (teachers)")
    classe_id: Optional[RowId] = Field(default=None, description="Class (students)")

    def profile(self) -> Dict[str, Any]:
        """Everything but the password, as stored in metadata and the audit trail."""
        return self.model_dump(mode="json", exclude={"password"})


class UserUpdate(BaseModel):
    email: Optional[str] = None
    nom: Optional[str] = None
    prenom: Optional[str] = None
    role: Optional[Role] = None
    matieres: Optional[List[str]] = None
    classe_id: Optional[RowId] = None
    active: Optional[bool] = None

    def changes(self) -> Dict[str, Any]:
        """Only the fields the client actually sent."""
        return self.model_dump(mode="json", exclude_unset=True)


class ClasseSummary(BaseModel):
    nom: Optional[str] = None
    niveau: Optional[Union[int, str]] = None


class UserRow(BaseModel):
    """A row of the provider's `users` table as listed to admins."""

    id: str
    email: Optional[str] = None
    role: Optional[str] = None
    nom: Optional[str] = None
    prenom: Optional[str] = None
    matieres: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    classe_id: Optional[RowId] = None
    active: Optional[bool] = None
    classes: Optional[ClasseSummary] = None
