"""
Publish the rendered calendar to Google Cloud Storage.
"""
from __future__ import annotations

import logging

from google.api_core import exceptions as gcp_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import storage

from .errors import UploadError

logger = logging.getLogger(__name__)

ICS_CONTENT_TYPE = "text/calendar"


def upload_calendar(
    data: bytes,
    bucket: str,
    path: str,
    content_type: str = ICS_CONTENT_TYPE,
    client: storage.Client | None = None,
) -> None:
    """Write *data* to gs://bucket/path, replacing any previous object."""
    try:
        client = client or storage.Client()
        blob = client.bucket(bucket).blob(path)
        blob.upload_from_string(data, content_type=content_type)
    except (gcp_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as e:
        raise UploadError(f"Failed to upload gs://{bucket}/{path}: {e}") from e
    logger.info("Uploaded calendar", extra={"bucket": bucket, "path": path, "bytes": len(data)})
