"""
FitLog Backend - Request Dependencies
=======================================

What:  FastAPI dependencies that hand route handlers their collaborators
       and decoded request input.
How:   Services live on `app.state` (set by create_app); the body decoders
       are async so the blocking handlers themselves can stay plain `def`.

Usage in routes:
    @router.post("/submit")
    def submit(
        submission: SheetRequest = Depends(read_submission),
        service: LogService = Depends(get_log_service),
    ):
        ...
"""

import logging

from fastapi import Request
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from app.config import Settings
from app.exceptions import UploadReadError, ValidationError
from app.schemas.log import SheetRequest
from app.services.log_service import LogService

logger = logging.getLogger(__name__)

IMAGE_FIELD = "image"


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_log_service(request: Request) -> LogService:
    return request.app.state.log_service


async def read_submission(request: Request) -> SheetRequest:
    """
    Decode the POST /submit body.

    Any body that is not JSON, or whose fields have the wrong JSON types
    (e.g. numbers in row_data), is rejected as "Invalid JSON".
    """
    body = await request.body()
    try:
        return SheetRequest.model_validate_json(body)
    except PydanticValidationError as e:
        raise ValidationError(
            message="Invalid JSON",
            context={"errors": e.error_count()},
        ) from e


async def read_image_upload(request: Request) -> bytes:
    """
    Pull the `image` file field out of a multipart form and read it.

    Raises:
        ValidationError:  no `image` file field, unparseable form, or the
                          image is larger than `max_image_bytes`.
        UploadReadError:  the upload stream failed while being read.
    """
    max_bytes = request.app.state.settings.max_image_bytes

    try:
        form = await request.form()
    except Exception as e:
        logger.warning("Could not parse multipart form: %s", e)
        raise ValidationError(message="No image found", field=IMAGE_FIELD) from e

    upload = form.get(IMAGE_FIELD)
    if not isinstance(upload, UploadFile):
        raise ValidationError(message="No image found", field=IMAGE_FIELD)

    # One byte past the limit is enough to tell an oversized upload
    try:
        content = await upload.read(max_bytes + 1)
    except Exception as e:
        logger.error("Failed reading uploaded image: %s", e)
        raise UploadReadError(context={"filename": upload.filename}) from e
    finally:
        await upload.close()

    if len(content) > max_bytes:
        raise ValidationError(
            message=f"Image exceeds maximum of {max_bytes // (1024 * 1024)}MB",
            field=IMAGE_FIELD,
            context={"max_size": max_bytes},
        )

    logger.info(
        "Received image upload: filename=%s, size=%d bytes",
        upload.filename or "unknown",
        len(content),
    )
    return content
