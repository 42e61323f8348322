"""Image upload and listing endpoints, always scoped to the caller."""

from __future__ import annotations

from flask import Blueprint, request

from gallery.api.deps import get_image_service, json_response, read_upload, require_auth, timing
from gallery.schemas import GetImagesQuerySchema, ImageSchema, ImagesUploadedSchema, page_schema
from gallery.services._shared.ports.token_provider import JwtPayload
from gallery.services.images.dto import ImageFilterIn

bp = Blueprint("images", __name__)

query_schema = GetImagesQuerySchema()
image_schema = ImageSchema()
uploaded_schema = ImagesUploadedSchema()
image_page_schema = page_schema(ImageSchema)


@bp.post("/upload")
@require_auth
@timing
def upload(*, principal: JwtPayload):
    """Upload up to ten images from the multipart ``images`` field."""

    files = [
        item
        for item in (read_upload(part) for part in request.files.getlist("images"))
        if item is not None
    ]
    result = get_image_service().upload_images(principal.user_id, files)
    return json_response(uploaded_schema.dump(result))


@bp.get("")
@require_auth
@timing
def list_images(*, principal: JwtPayload):
    """Return one page of the caller's images, oldest first."""

    args = query_schema.load(request.args)
    filters = ImageFilterIn(
        created_after=args["created_after"],
        created_before=args["created_before"],
        min_size=args["min_size"],
        max_size=args["max_size"],
    )
    page = get_image_service().list_images(
        principal.user_id,
        filters,
        page_number=args["page_number"],
        page_size=args["page_size"],
    )
    return json_response(image_page_schema.dump(page))


@bp.get("/<string:image_id>")
@require_auth
@timing
def get_image(image_id: str, *, principal: JwtPayload):
    """Return one of the caller's images; 404 for unknown or foreign ids."""

    result = get_image_service().get_image(image_id, principal.user_id)
    return json_response(image_schema.dump(result))
