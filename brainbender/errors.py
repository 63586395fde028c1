"""
brainbender/errors.py – failure taxonomy for the render-and-publish pipeline.

Every stage raises one of these; none of them is retried. The HTTP layer turns
any of them into a 500 response carrying ``str(exc)``.
"""
from __future__ import annotations


class MissingAssetError(FileNotFoundError):
    """A local asset the pipeline depends on (font, background, dataset) is absent."""


class RenderError(RuntimeError):
    pass


class SynthesisError(RuntimeError):
    pass


class EncoderError(RuntimeError):
    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        self.returncode = returncode
        self.stderr = stderr
        if stderr:
            tail = stderr[-4000:]
            message = f"{message}\n--- STDERR (last 4000 chars) ---\n{tail}"
        super().__init__(message)


class PublishError(RuntimeError):
    pass
