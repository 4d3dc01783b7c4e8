"""
École API — Google Drive File Gateway
======================================

What:  Uploads files to a Drive folder, makes them publicly readable, and
       deletes them by id.
Why:   Course material is hosted on Drive; this process keeps no local copy
       once the request completes.
How:   google-auth exchanges the configured refresh token once at startup;
       google-api-python-client performs the Drive v3 calls. Those clients
       are blocking, so every call runs in Starlette's threadpool and the
       event loop keeps serving other requests meanwhile.

State Machine:
    UNINITIALIZED ──initialize()──▶ READY      (credentials exchanged)
                  └─────────────────▶ DISABLED (missing credentials or
                                                exchange failure)

    There are no other transitions: a disabled gateway stays disabled until
    the process restarts, and every operation checks the state first.

Operation Contracts:
    upload(content, name, mime_type)
        not READY         → ServiceUnavailableError
        no bytes          → ValidationError
        Drive failure     → ProviderError ("Échec du téléversement")
                            (HTTP error, token refresh, transport or socket)
        success           → UploadedFile(id, name, url)

    delete(file_id)
        not READY         → ServiceUnavailableError
        no id             → ValidationError
        Drive 404         → NotFoundError (descriptive, names the id)
        Drive failure     → ProviderError ("Échec de la suppression")
                            (any non-404 failure, same classes as upload)
"""

import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import google.auth.transport.requests
from httplib2 import HttpLib2Error
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleApiClientError
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload
from starlette.concurrency import run_in_threadpool

from ecole_api.config import settings
from ecole_api.exceptions import (
    NotFoundError,
    ProviderError,
    ServiceUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive"]
SHARE_URL_TEMPLATE = "https://drive.google.com/file/d/{file_id}/view"
PUBLIC_READ_PERMISSION = {"role": "reader", "type": "anyone"}

# Everything a Drive call can raise short of a programming error: API errors,
# credential refresh failures (RefreshError, TransportError), httplib2 and
# socket-level failures
DRIVE_FAILURES = (GoogleApiClientError, GoogleAuthError, HttpLib2Error, OSError)


def http_status(error: Exception) -> Optional[int]:
    """HTTP status of a Drive API error, None for failures below HTTP."""
    if isinstance(error, HttpError):
        return error.resp.status
    return None


class DriveStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    DISABLED = "disabled"


@dataclass(frozen=True)
class UploadedFile:
    id: str
    name: str

    @property
    def url(self) -> str:
        return SHARE_URL_TEMPLATE.format(file_id=self.id)


class DriveService:
    """
    Injected dependency wrapping the Drive client handle and its status.

    Args:
        folder_id: Parent folder for uploads (defaults to settings).
        client:    A ready-built Drive resource. Passing one marks the
                   service READY immediately (used by tests and scripts).
    """

    def __init__(self, folder_id: Optional[str] = None, client: Any = None):
        self.folder_id = folder_id if folder_id is not None else settings.google_drive_folder_id
        self._client = client
        self.status = DriveStatus.READY if client is not None else DriveStatus.UNINITIALIZED
        self.disabled_reason: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.status is DriveStatus.READY

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def initialize(self) -> DriveStatus:
        """
        Exchange the refresh token and build the Drive client, once.

        Never raises: failures are logged and leave the gateway DISABLED so
        the rest of the API keeps serving.
        """
        if self.status is not DriveStatus.UNINITIALIZED:
            return self.status

        missing = [
            name
            for name, value in (
                ("GOOGLE_CLIENT_ID", settings.google_client_id),
                ("GOOGLE_CLIENT_SECRET", settings.google_client_secret),
                ("GOOGLE_REFRESH_TOKEN", settings.google_refresh_token),
            )
            if not value
        ]
        if missing:
            return self._disable(f"missing credentials: {', '.join(missing)}")

        try:
            self._client = await run_in_threadpool(self._build_client)
        except DRIVE_FAILURES as e:
            return self._disable(f"credential exchange failed: {e}")

        self.status = DriveStatus.READY
        logger.info("Google Drive configured (folder=%s)", self.folder_id or "<root>")
        return self.status

    def _build_client(self) -> Any:
        credentials = Credentials(
            token=None,
            refresh_token=settings.google_refresh_token,
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            token_uri=settings.google_token_uri,
            scopes=DRIVE_SCOPES,
        )
        # Fail at startup, not on the first upload, when the refresh token is bad
        credentials.refresh(google.auth.transport.requests.Request())
        return build("drive", "v3", credentials=credentials, cache_discovery=False)

    def _disable(self, reason: str) -> DriveStatus:
        self.status = DriveStatus.DISABLED
        self.disabled_reason = reason
        logger.error("Google Drive disabled: %s", reason)
        return self.status

    def _require_ready(self) -> None:
        if not self.is_ready:
            raise ServiceUnavailableError(
                message="Google Drive non configuré",
                service="drive",
                context={"status": self.status.value, "reason": self.disabled_reason},
            )

    # ── Operations ────────────────────────────────────────────────────────

    async def upload(
        self,
        content: Optional[bytes],
        name: Optional[str],
        mime_type: Optional[str] = None,
    ) -> UploadedFile:
        self._require_ready()

        if not content:
            raise ValidationError(message="Aucun fichier fourni", field="file")

        file_name = name or "fichier"
        try:
            uploaded = await run_in_threadpool(
                self._upload_sync, content, file_name, mime_type or "application/octet-stream"
            )
        except DRIVE_FAILURES as e:
            logger.error("Drive upload failed for %s: %r", file_name, e)
            raise ProviderError(
                message="Échec du téléversement",
                context={"file_name": file_name, "status": http_status(e)},
            )

        logger.info("Uploaded %s to Drive as %s (%d bytes)", file_name, uploaded.id, len(content))
        return uploaded

    def _upload_sync(self, content: bytes, name: str, mime_type: str) -> UploadedFile:
        metadata = {"name": name}
        if self.folder_id:
            metadata["parents"] = [self.folder_id]

        media = MediaIoBaseUpload(io.BytesIO(content), mimetype=mime_type, resumable=False)
        created = (
            self._client.files()
            .create(body=metadata, media_body=media, fields="id, name")
            .execute()
        )
        file_id = created["id"]

        self._client.permissions().create(
            fileId=file_id, body=PUBLIC_READ_PERMISSION
        ).execute()

        return UploadedFile(id=file_id, name=created.get("name") or name)

    async def delete(self, file_id: Optional[str]) -> None:
        self._require_ready()

        if not file_id:
            raise ValidationError(message="ID fichier manquant", field="fileId")

        try:
            await run_in_threadpool(self._delete_sync, file_id)
        except DRIVE_FAILURES as e:
            if http_status(e) == 404:
                raise NotFoundError(
                    resource="file",
                    resource_id=file_id,
                    message=f"Fichier introuvable sur Google Drive (id: {file_id})",
                )
            logger.error("Drive delete failed for %s: %r", file_id, e)
            raise ProviderError(
                message="Échec de la suppression",
                context={"file_id": file_id, "status": http_status(e)},
            )

        logger.info("Deleted Drive file %s", file_id)

    def _delete_sync(self, file_id: str) -> None:
        self._client.files().delete(fileId=file_id).execute()


# ── Singleton Instance ────────────────────────────────────────────────────
# Initialized by the application lifespan; routes receive it via Depends
drive_service = DriveService()


def get_drive_service() -> DriveService:
    return drive_service
