import asyncio
from typing import Callable, Optional

import structlog
from fastapi import APIRouter, Depends, Form, Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from api.schemas import ErrorResponse, OptimizationResult
from core.errors import CleanupError, ProcessingError, ValidationError
from core.reduction import compute_reduction
from core.transcoder import Transcoder, get_transcoder, resolve_method

logger = structlog.get_logger(__name__)

router = APIRouter()

TranscoderFactory = Callable[[Optional[str]], Transcoder]


def transcoder_factory(request: Request) -> TranscoderFactory:
    app_settings = request.app.state.settings
    return lambda method: get_transcoder(method, app_settings)


@router.post(
    "/optimize",
    response_model=OptimizationResult,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def optimize_video(
    request: Request,
    method: Optional[str] = Form(None),
    make_transcoder: TranscoderFactory = Depends(transcoder_factory),
):
    # A text field named "video" counts as no upload.
    video = (await request.form()).get("video")
    if not isinstance(video, UploadFile) or not video.filename:
        raise ValidationError()

    storage = request.app.state.storage
    method = resolve_method(method)
    try:
        upload = await run_in_threadpool(storage.save_upload, video.file, video.filename)
    except OSError as e:
        raise ProcessingError(f"Could not stage upload: {e}", method=method) from e
    output_path = storage.output_path_for(upload.path)

    try:
        original_size = storage.size_of(upload.path)
        await make_transcoder(method).transcode(upload.path, output_path)
        optimized_size = storage.size_of(output_path)
    except asyncio.CancelledError:
        _discard(storage, upload.path, output_path)
        raise
    except Exception as e:
        _discard(storage, upload.path, output_path)
        if isinstance(e, ProcessingError):
            raise
        raise ProcessingError(str(e), method=method) from e

    prefix = request.app.state.settings.videos_url_prefix.rstrip("/")
    result = OptimizationResult(
        original_size=original_size,
        optimized_size=optimized_size,
        original_url=f"{prefix}/{upload.path.name}",
        optimized_url=f"{prefix}/{output_path.name}",
        reduction=compute_reduction(original_size, optimized_size),
    )

    request.app.state.cleanup.schedule([upload.path, output_path])
    logger.info("video_optimized", method=method, original_size=original_size,
                optimized_size=optimized_size, reduction=result.reduction)
    return result


def _discard(storage, *paths) -> None:
    for path in paths:
        try:
            storage.remove(path)
        except CleanupError as e:
            logger.error("discard_failed", path=e.path, reason=e.reason)
