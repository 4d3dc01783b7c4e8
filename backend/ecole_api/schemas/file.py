"""
École API — File Gateway Schemas
=================================

What:  Contracts for `/api/upload` and `/api/delete-file`.
Why:   The frontend expects camelCase keys (`fileUrl`, `fileId`); Python code
       uses snake_case names and the aliases do the translation.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    success: bool = True
    file_url: str = Field(alias="fileUrl")
    file_name: str = Field(alias="fileName")
    file_id: str = Field(alias="fileId")

    model_config = {"populate_by_name": True}


class DeleteFileRequest(BaseModel):
    file_id: Optional[str] = Field(default=None, alias="fileId")

    model_config = {"populate_by_name": True}


class DeleteFileResponse(BaseModel):
    success: bool = True
    message: str = "Fichier supprimé avec succès"
