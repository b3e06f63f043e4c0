import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Type

import structlog

from config import Settings, settings
from core.errors import ProcessingError

logger = structlog.get_logger(__name__)

# Encoding parameters are fixed; only the binaries are configurable.
FFMPEG_OUTPUT_OPTIONS = [
    "-c:v", "libx264",
    "-crf", "23",
    "-preset", "medium",
    "-c:a", "aac",
    "-b:a", "128k",
]
HANDBRAKE_PRESET = "Very Fast 1080p30"

STDERR_TAIL_CHARS = 2000


@dataclass(frozen=True)
class TranscodeStats:
    method: str
    elapsed: float
    returncode: int


class Transcoder:
    """Runs one external encoder against a staged file.

    Subclasses only describe the command line; spawning, waiting and mapping
    failures to ProcessingError is shared.
    """

    method: str = ""
    default_binary: str = ""

    def __init__(self, binary: Optional[str] = None):
        self.binary = binary or self.default_binary

    def build_command(self, input_path: str, output_path: str) -> List[str]:
        raise NotImplementedError

    async def transcode(self, input_path, output_path) -> TranscodeStats:
        input_path, output_path = str(input_path), str(output_path)
        cmd = self.build_command(input_path, output_path)
        log = logger.bind(method=self.method, input=input_path, output=output_path)
        log.info("transcode_started", command=cmd[0])
        started = time.monotonic()

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            log.error("transcode_spawn_failed", error=str(e))
            raise ProcessingError(f"{self.method} could not be started: {e}",
                                  method=self.method) from e

        try:
            _, stderr = await proc.communicate()
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            log.warning("transcode_cancelled", elapsed=round(time.monotonic() - started, 2))
            raise
        elapsed = time.monotonic() - started
        stderr_tail = (stderr or b"").decode("utf-8", "ignore")[-STDERR_TAIL_CHARS:]

        if proc.returncode != 0:
            log.error("transcode_failed", returncode=proc.returncode,
                      elapsed=round(elapsed, 2), stderr=stderr_tail)
            raise ProcessingError(f"{self.method} exited with code {proc.returncode}",
                                  method=self.method, returncode=proc.returncode,
                                  stderr=stderr_tail)

        if not Path(output_path).is_file():
            log.error("transcode_output_missing", elapsed=round(elapsed, 2))
            raise ProcessingError(f"{self.method} produced no output at {output_path}",
                                  method=self.method, returncode=proc.returncode,
                                  stderr=stderr_tail)

        log.info("transcode_finished", elapsed=round(elapsed, 2))
        return TranscodeStats(method=self.method, elapsed=elapsed, returncode=proc.returncode)


class FFmpegTranscoder(Transcoder):
    method = "ffmpeg"
    default_binary = "ffmpeg"

    def build_command(self, input_path: str, output_path: str) -> List[str]:
        return [self.binary, "-y", "-i", input_path, *FFMPEG_OUTPUT_OPTIONS, output_path]


class HandbrakeTranscoder(Transcoder):
    method = "handbrake"
    default_binary = "HandBrakeCLI"

    def build_command(self, input_path: str, output_path: str) -> List[str]:
        return [self.binary, "-i", input_path, "-o", output_path, "--preset", HANDBRAKE_PRESET]


TRANSCODERS: Dict[str, Type[Transcoder]] = {
    FFmpegTranscoder.method: FFmpegTranscoder,
    HandbrakeTranscoder.method: HandbrakeTranscoder,
}


def resolve_method(method: Optional[str]) -> str:
    """Normalise a requested method; unknown or missing names fall back to ffmpeg."""
    name = (method or "").strip().lower()
    if name in TRANSCODERS:
        return name
    return FFmpegTranscoder.method


def get_transcoder(method: Optional[str], config: Optional[Settings] = None) -> Transcoder:
    config = config or settings
    binaries = {
        FFmpegTranscoder.method: config.ffmpeg_binary,
        HandbrakeTranscoder.method: config.handbrake_binary,
    }
    name = resolve_method(method)
    return TRANSCODERS[name](binaries[name])
