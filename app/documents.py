from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from db import models
from errors import BackendError, ValidationError, backend_call
from storage import UploadedDocument, download_file, upload_file

logger = logging.getLogger(__name__)

DOCUMENT_COLUMNS = "id, title, file_url, created_at, registration_id, team_registrations(team_name)"


def list_team_documents(client, registration_ids: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
    if registration_ids is not None and not registration_ids:
        return []

    with backend_call("load team documents"):
        query = client.table(models.TEAM_DOCUMENTS).select(DOCUMENT_COLUMNS)
        if registration_ids is not None:
            query = query.in_("registration_id", list(registration_ids))
        result = query.order("created_at", desc=True).execute()

    documents = []
    for row in result.data or []:
        doc = dict(row)
        team = doc.pop("team_registrations", None) or {}
        doc["team_name"] = team.get("team_name")
        documents.append(doc)
    return documents


def add_team_document(
    client,
    registration_id: Any,
    title: str,
    upload: UploadedDocument,
    bucket: str = "team-documents",
) -> Dict[str, Any]:
    title = (title or "").strip() or upload.filename
    if not registration_id:
        raise ValidationError({"registration_id": "Choose a team for this document."})

    file_url = upload_file(client, bucket, upload)
    with backend_call("save team document"):
        result = (
            client.table(models.TEAM_DOCUMENTS)
            .insert({"registration_id": registration_id, "title": title, "file_url": file_url})
            .execute()
        )
    if not result.data:
        raise BackendError("Failed to save team document", detail="No data returned.")

    logger.info("Document %r added for registration %s", title, registration_id)
    return result.data[0]


def download_team_document(client, document: Dict[str, Any], bucket: str = "team-documents") -> bytes:
    return download_file(client, bucket, document["file_url"])
