"""
Attachment schemas.

Uploads arrive as multipart form data, so there is no request model;
the upload rules are checked by ``AttachmentService.upload``.
"""

import re
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

MIME_TYPE_PATTERN = re.compile(r"^(image|application|text|video|audio)/[\w.-]+$")


class AttachmentResponse(BaseModel):
    """Attachment metadata."""

    id: uuid.UUID
    note_id: uuid.UUID
    file_url: str
    file_name: str
    file_mime_type: str
    file_size: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
