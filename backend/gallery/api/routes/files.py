"""Single-file upload endpoint."""

from __future__ import annotations

from flask import Blueprint, request

from gallery.api.deps import get_file_service, json_response, read_upload, require_auth, timing
from gallery.schemas import StoredObjectSchema
from gallery.services._shared.ports.token_provider import JwtPayload

bp = Blueprint("files", __name__)

stored_object_schema = StoredObjectSchema()


@bp.post("/upload")
@require_auth
@timing
def upload(*, principal: JwtPayload):
    """Store the multipart ``file`` part under the default prefix."""

    result = get_file_service().upload_file(read_upload(request.files.get("file")))
    return json_response(stored_object_schema.dump(result), status=201)
