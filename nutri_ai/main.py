"""Main FastAPI application."""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Body, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from nutri_ai import config
from nutri_ai.acquire import CapturedImage
from nutri_ai.controller import SessionController
from nutri_ai.errors import (
    AcquisitionError,
    ConfigurationError,
    ExtractionError,
    InvalidTransition,
    NutriAIError,
    TransportError,
)
from nutri_ai.renderer import render_html
from nutri_ai.session import Effect

logging.basicConfig(
    level=logging.INFO,
    stream=sys.stdout,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ConfigurationError: 500,
    TransportError: 502,
    ExtractionError: 422,
    AcquisitionError: 503,
    InvalidTransition: 409,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not config.is_configured(config.CORRECT_PIN):
        logger.warning("Unlock PIN is not configured; the app will stay locked")
    app.state.session = SessionController()
    yield
    app.state.session.shutdown()


# -----------------------------------
# App setup
# -----------------------------------

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=not config.ALLOW_ALL_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _session(request: Request) -> SessionController:
    return request.app.state.session


def _http_error(e: NutriAIError, detail: Optional[str] = None) -> HTTPException:
    status = next(
        (code for error_type, code in ERROR_STATUS.items() if isinstance(e, error_type)),
        500,
    )
    return HTTPException(status, detail or str(e))


def _state_payload(session: SessionController) -> dict:
    state = session.state
    return {
        "screen": state.screen.value,
        "entered": len(state.entered_pin),
        "error": state.error,
    }


def _analysis_payload(session: SessionController, analysis: dict) -> dict:
    view = analysis["view"]
    return {
        "screen": session.state.screen.value,
        "result": view.as_dict(),
        "html": render_html(view),
        "processing_times": analysis["processing_times"],
    }


# -----------------------------------
# Service endpoints
# -----------------------------------

@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/state")
async def get_state(request: Request):
    return _state_payload(_session(request))


# -----------------------------------
# PIN gate
# -----------------------------------

@app.post("/keypad")
async def press_key(request: Request, key: str = Body(..., embed=True)):
    session = _session(request)
    try:
        effects = session.press_key(key)
    except InvalidTransition as e:
        raise _http_error(e)
    payload = _state_payload(session)
    payload["rejected"] = Effect.REJECT_PIN in effects
    return payload


# -----------------------------------
# Camera
# -----------------------------------

@app.post("/camera/start")
async def start_camera(request: Request):
    session = _session(request)
    try:
        await session.start_camera()
    except NutriAIError as e:
        raise _http_error(e)
    return _state_payload(session)


@app.get("/camera/preview")
async def camera_preview(request: Request):
    session = _session(request)
    try:
        frame = await session.preview()
    except NutriAIError as e:
        raise _http_error(e)
    return Response(content=frame, media_type="image/jpeg")


@app.post("/camera/capture")
async def capture_photo(request: Request):
    session = _session(request)
    logger.info("[PIPELINE] Starting /camera/capture")
    try:
        analysis = await session.capture()
    except (InvalidTransition, AcquisitionError) as e:
        # snapshot never reached the analysis step
        raise _http_error(e)
    except NutriAIError as e:
        raise _http_error(e, f"Analysis failed: {e}")
    except Exception as e:
        raise HTTPException(500, f"Analysis failed: {e}")
    return _analysis_payload(session, analysis)


# -----------------------------------
# Upload
# -----------------------------------

@app.post("/analyze")
async def analyze_photo(request: Request, image: UploadFile = File(None)):
    if not image:
        raise HTTPException(422, "Image field is required")

    session = _session(request)
    logger.info(f"[PIPELINE] Starting /analyze endpoint for file: {image.filename}")
    content = await image.read()
    captured = CapturedImage.from_upload(content, image.content_type)

    try:
        analysis = await session.upload(captured)
    except InvalidTransition as e:
        raise _http_error(e)
    except NutriAIError as e:
        raise _http_error(e, f"Analysis failed: {e}")
    except Exception as e:
        raise HTTPException(500, f"Analysis failed: {e}")
    return _analysis_payload(session, analysis)


@app.post("/back")
async def back(request: Request):
    session = _session(request)
    try:
        session.back()
    except InvalidTransition as e:
        raise _http_error(e)
    return _state_payload(session)
