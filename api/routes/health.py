import shutil

from fastapi import APIRouter, Request

from api.schemas import HealthStatus

router = APIRouter()


@router.get("/", response_model=HealthStatus)
async def health_check(request: Request):
    app_settings = request.app.state.settings
    return HealthStatus(
        status="healthy",
        encoders={
            "ffmpeg": shutil.which(app_settings.ffmpeg_binary) is not None,
            "handbrake": shutil.which(app_settings.handbrake_binary) is not None,
        },
        pending_cleanups=len(request.app.state.cleanup.pending()),
    )
