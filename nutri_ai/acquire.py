"""Image acquisition: uploaded files and single frames from a local camera."""

import base64
import logging
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from nutri_ai.config import NUTRI_AI_CAMERA_INDEX
from nutri_ai.errors import AcquisitionError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class CapturedImage:
    """A single still image, consumed once by the inference client."""

    mime_type: str
    data: bytes

    @classmethod
    def from_upload(cls, content: bytes, content_type: Optional[str]) -> "CapturedImage":
        # No type/size validation; bad files fail at inference
        return cls(mime_type=content_type or DEFAULT_MIME_TYPE, data=content)

    @property
    def data_uri(self) -> str:
        b64 = base64.b64encode(self.data).decode("utf-8")
        return f"data:{self.mime_type};base64,{b64}"

    @property
    def size_kb(self) -> float:
        return len(self.data) / 1024


class CameraAcquirer:
    """
    Owns one cv2.VideoCapture handle.

    Frames are mirrored horizontally so the snapshot matches the preview.
    release() must be called on every exit path, otherwise the device stays
    busy (camera light on).
    """

    def __init__(self, device_index: int = NUTRI_AI_CAMERA_INDEX):
        self.device_index = device_index
        self._capture = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def open(self) -> None:
        if self._capture is not None:
            return
        logger.info("Opening camera device %s", self.device_index)
        capture = cv2.VideoCapture(self.device_index)
        if not capture.isOpened():
            capture.release()
            raise AcquisitionError(
                "Could not access the camera. Please ensure permissions are granted."
            )
        self._capture = capture

    def _read_mirrored(self) -> np.ndarray:
        if self._capture is None:
            raise AcquisitionError("Camera is not open")
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise AcquisitionError("Failed to read a frame from the camera")
        return cv2.flip(frame, 1)

    def _encode_jpeg(self, frame: np.ndarray) -> bytes:
        ok, buf = cv2.imencode(".jpg", frame)
        if not ok:
            raise AcquisitionError("Failed to encode camera frame as JPEG")
        return buf.tobytes()

    def preview(self) -> bytes:
        return self._encode_jpeg(self._read_mirrored())

    def snapshot(self) -> CapturedImage:
        """Grab the current frame at native resolution as a JPEG image."""
        frame = self._read_mirrored()
        h, w = frame.shape[:2]
        image = CapturedImage(mime_type="image/jpeg", data=self._encode_jpeg(frame))
        logger.info("Captured %sx%s frame (%.1fkb)", w, h, image.size_kb)
        return image

    def release(self) -> None:
        if self._capture is None:
            return
        self._capture.release()
        self._capture = None
        logger.info("Released camera device %s", self.device_index)

    def __enter__(self) -> "CameraAcquirer":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
