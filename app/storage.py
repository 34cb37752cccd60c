from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Optional

from errors import backend_call

logger = logging.getLogger(__name__)


@dataclass
class UploadedDocument:
    filename: str
    data: bytes
    content_type: Optional[str] = None

    @classmethod
    def from_streamlit(cls, uploaded_file) -> "UploadedDocument":
        return cls(
            filename=uploaded_file.name,
            data=uploaded_file.getvalue(),
            content_type=uploaded_file.type,
        )


def timestamped_filename(filename: str, now: Optional[float] = None) -> str:
    """`race.pdf` -> `1718000000000.pdf`, keyed by upload time in ms."""
    stamp = int((time.time() if now is None else now) * 1000)
    _, ext = os.path.splitext(filename)
    return f"{stamp}{ext.lower()}" if ext else str(stamp)


def object_path_from_url(file_url: str) -> str:
    return file_url.rstrip("/").split("/")[-1].split("?")[0]


def upload_file(client, bucket: str, upload: UploadedDocument) -> str:
    path = timestamped_filename(upload.filename)
    options = {"content-type": upload.content_type} if upload.content_type else None

    with backend_call(f"upload {upload.filename}"):
        if options:
            client.storage.from_(bucket).upload(path=path, file=upload.data, file_options=options)
        else:
            client.storage.from_(bucket).upload(path=path, file=upload.data)
        public_url = client.storage.from_(bucket).get_public_url(path)

    logger.info("Uploaded %s to %s/%s", upload.filename, bucket, path)
    return public_url


def download_file(client, bucket: str, file_url: str) -> bytes:
    path = object_path_from_url(file_url)
    with backend_call("download document"):
        return client.storage.from_(bucket).download(path)
