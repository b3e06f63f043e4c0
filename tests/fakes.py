from core.errors import ProcessingError
from core.transcoder import TranscodeStats, Transcoder, resolve_method


class FakeTranscoder(Transcoder):
    """Writes a file of a fixed size instead of running an encoder."""

    def __init__(self, method: str, output_size: int = 0, fail: bool = False, calls=None):
        super().__init__("fake")
        self.method = method
        self.output_size = output_size
        self.fail = fail
        self.calls = calls if calls is not None else []

    async def transcode(self, input_path, output_path) -> TranscodeStats:
        self.calls.append((self.method, str(input_path), str(output_path)))
        with open(output_path, "wb") as f:
            f.write(b"\0" * (self.output_size // 2))
            if self.fail:
                raise ProcessingError("encoder crashed", method=self.method, returncode=1)
            f.write(b"\0" * (self.output_size - self.output_size // 2))
        return TranscodeStats(method=self.method, elapsed=0.0, returncode=0)


class FakeTranscoderFactory:
    def __init__(self, output_size: int = 0, fail: bool = False):
        self.output_size = output_size
        self.fail = fail
        self.calls = []

    def __call__(self, method):
        return FakeTranscoder(resolve_method(method), self.output_size, self.fail, self.calls)
