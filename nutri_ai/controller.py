import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from nutri_ai import config
from nutri_ai.acquire import CameraAcquirer, CapturedImage
from nutri_ai.errors import AcquisitionError, InvalidTransition
from nutri_ai.renderer import render_result
from nutri_ai.services import analyze_image
from nutri_ai.session import Effect, Event, SessionState, UIState, transition

logger = logging.getLogger(__name__)


class SessionController:
    """
    Holds the single session and the single camera handle, and carries out
    the effects produced by session.transition().

    All methods are called from the event loop. Only camera I/O and the
    analysis call run in worker threads; the camera handle is never released
    while one of those reads is in flight.
    """

    def __init__(
        self,
        correct_pin: Optional[str] = None,
        camera_factory: Callable[[], CameraAcquirer] = CameraAcquirer,
        analyzer: Callable[[CapturedImage], Dict[str, Any]] = analyze_image,
    ):
        self.state = SessionState()
        self._correct_pin = correct_pin if correct_pin is not None else config.CORRECT_PIN
        self._camera_factory = camera_factory
        self._analyzer = analyzer
        self._camera: Optional[CameraAcquirer] = None
        self._camera_busy = False

    def _dispatch(self, event: Event, value: Any = None) -> List[Effect]:
        self.state, effects = transition(
            self.state, event, value, correct_pin=self._correct_pin
        )
        for effect in effects:
            if effect is Effect.RELEASE_STREAM:
                self._release_camera()
            elif effect is Effect.NOTIFY_ERROR:
                logger.error("User notified: %s", self.state.error)
            elif effect is Effect.REJECT_PIN:
                logger.warning("Incorrect PIN entered")
        return effects

    def _release_camera(self) -> None:
        if self._camera is not None:
            self._camera.release()
            self._camera = None

    async def _camera_call(self, fn: Callable[[], Any]) -> Any:
        self._camera_busy = True
        try:
            return await asyncio.to_thread(fn)
        finally:
            self._camera_busy = False

    def press_key(self, key: str) -> List[Effect]:
        return self._dispatch(Event.KEY, key)

    async def start_camera(self) -> None:
        effects = self._dispatch(Event.START_CAMERA)
        if Effect.START_STREAM not in effects:
            return
        self._release_camera()
        self._camera = self._camera_factory()
        try:
            await self._camera_call(self._camera.open)
        except AcquisitionError as e:
            logger.error("Error accessing camera: %s", e)
            self._dispatch(Event.CAMERA_FAILED, str(e))
            raise

    def _active_camera(self) -> CameraAcquirer:
        if self.state.screen is not UIState.CAMERA or self._camera is None:
            raise InvalidTransition("Camera is not active")
        if self._camera_busy:
            raise InvalidTransition("Camera is busy")
        return self._camera

    async def preview(self) -> bytes:
        return await self._camera_call(self._active_camera().preview)

    async def capture(self) -> Dict[str, Any]:
        camera = self._active_camera()
        try:
            image = await self._camera_call(camera.snapshot)
        except AcquisitionError as e:
            logger.error("Error capturing photo: %s", e)
            self._dispatch(Event.CAMERA_FAILED, str(e))
            raise
        return await self._analyze(Event.CAPTURE, image)

    async def upload(self, image: CapturedImage) -> Dict[str, Any]:
        return await self._analyze(Event.UPLOAD, image)

    async def _analyze(self, event: Event, image: CapturedImage) -> Dict[str, Any]:
        self._dispatch(event, image)
        attempt = self.state.attempt
        try:
            analysis = await asyncio.to_thread(self._analyzer, image)
            view = render_result(analysis["result"])
        except Exception as e:
            logger.exception("Analysis failed")
            self._dispatch(Event.ANALYSIS_FAILED, (attempt, f"Analysis failed: {e}"))
            raise
        self._dispatch(Event.ANALYSIS_SUCCEEDED, (attempt, view))
        return {"view": view, "processing_times": analysis.get("processing_times", {})}

    def back(self) -> None:
        if self._camera_busy:
            raise InvalidTransition("Camera is busy, try again once the photo is taken")
        self._dispatch(Event.BACK)

    def shutdown(self) -> None:
        self._release_camera()
