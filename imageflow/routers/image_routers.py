# imageflow/routers/image_routers.py
"""
Image transformation HTTP endpoints.

Role: Serves images from the configured images directory, transformed by an
operations string given in the ``transform`` query parameter.
Responsibilities: Path validation, responsive operation selection from the
client metrics cookie, response headers
Interactions: Uses TransformPipeline for decoding, transforming and encoding
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from ..config import Settings, get_settings
from ..constants import TRANSFORM_QUERY_PARAM
from ..enums import LogEmoji, LoggerName, LogSource
from ..services.logger import get_service_logger
from ..services.transform_pipeline import TransformPipeline, get_responsive_operations
from ..utils.file_helpers import validate_file_path
from ..utils.router_helpers import handle_exceptions

logger = get_service_logger(LoggerName.TRANSFORM_PIPELINE, LogSource.API)

router = APIRouter(tags=["images"])


def select_operations(
    operations: Optional[str], client_metrics: Optional[str]
) -> str:
    """Apply the responsive selector when the client reported its metrics."""
    if not operations:
        return ""
    if client_metrics is None:
        return operations
    return get_responsive_operations(client_metrics, operations)


@router.get("/images/{image_path:path}")
@handle_exceptions("transform image")
def get_transformed_image(
    image_path: str,
    request: Request,
    transform: Optional[str] = Query(
        default=None,
        alias=TRANSFORM_QUERY_PARAM,
        description="Operations string, e.g. 'resizeCrop,400,300|format,webp'",
    ),
    settings: Settings = Depends(get_settings),
) -> Response:
    """
    Return an image from the images directory with ``transform`` applied.

    When the client metrics cookie is present, rule-tagged entries of the
    operations string are filtered against it first.
    """
    source = validate_file_path(image_path, settings.images_directory)
    operations = select_operations(
        transform, request.cookies.get(settings.client_metrics_cookie)
    )

    pipeline = TransformPipeline.create_from_file(source, settings=settings)
    if settings.default_compression_quality is not None:
        pipeline.set_compression_quality(settings.default_compression_quality)
    pipeline.transform(operations)

    content = pipeline.get_bytes()
    logger.info(
        f"Served {image_path}",
        emoji=LogEmoji.IMAGE,
        extra_context={
            "operations": operations,
            "width": pipeline.get_width(),
            "height": pipeline.get_height(),
            "bytes": len(content),
        },
    )

    return Response(
        content=content,
        media_type=pipeline.get_mime_type(),
        headers={
            "Cache-Control": f"public, max-age={settings.cache_max_age}",
            "Vary": "Cookie",
        },
    )
