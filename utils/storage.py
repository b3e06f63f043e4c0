import os
import re
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

import structlog

from core.errors import CleanupError

logger = structlog.get_logger(__name__)

OPTIMIZED_PREFIX = "optimized-"
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class UploadRecord:
    original_filename: str
    path: Path
    size: int

    @property
    def name(self) -> str:
        return self.path.name


def sanitize_filename(filename: str) -> str:
    name = os.path.basename((filename or "").replace("\\", "/"))
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name[:120] or "video"


class StagingArea:
    """Flat directory of uploaded and optimised files, served under /videos."""

    def __init__(self, root):
        self.root = Path(root)

    def ensure(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def generate_name(self, original_filename: str) -> str:
        return f"{uuid.uuid4().hex}-{sanitize_filename(original_filename)}"

    def output_path_for(self, input_path: Path) -> Path:
        return self.root / f"{OPTIMIZED_PREFIX}{Path(input_path).name}"

    def save_upload(self, fileobj: BinaryIO, original_filename: str) -> UploadRecord:
        self.ensure()
        path = self.root / self.generate_name(original_filename)
        with open(path, "wb") as buffer:
            shutil.copyfileobj(fileobj, buffer)
        record = UploadRecord(original_filename=original_filename, path=path,
                              size=self.size_of(path))
        logger.info("upload_staged", filename=original_filename, path=str(path),
                    size=record.size)
        return record

    def size_of(self, path) -> int:
        return Path(path).stat().st_size

    def remove(self, path) -> bool:
        """Delete a staged file. Returns False if it was already gone."""
        try:
            Path(path).unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise CleanupError(str(path), str(e)) from e
        return True
