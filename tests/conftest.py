import json

import httpx
import numpy as np
import pytest

from nutri_ai import config, openai_client
from nutri_ai.acquire import CapturedImage
from nutri_ai.errors import AcquisitionError
from nutri_ai.openai_client import get_openai_client

SAMPLE_RESULT = {
    "items": [{"item": "Grilled chicken", "calories": 280.4}, {"item": "Rice", "calories": 219.5}],
    "nutrition_summary": {
        "total_calories": 500,
        "macronutrients": {"protein_g": 10, "carbs_g": 50, "fat_g": 20, "fiber_g": 5},
        "micronutrients": {"sugar_g": 5, "sodium_mg": 300},
    },
    "general_summary": "ok",
    "confidence_score": "High",
    "health_tips": "tip",
}

FENCED_COMPLETION = "```json\n" + json.dumps(SAMPLE_RESULT) + "\n```"


def completion_body(content):
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


class FakeCompletionAPI:
    """Stands in for the remote endpoint behind httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.content = FENCED_COMPLETION
        self.network_error = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.network_error:
            raise httpx.ConnectError("connection refused", request=request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": {"message": "boom"}})
        return httpx.Response(200, json=completion_body(self.content))

    @property
    def last_body(self):
        return json.loads(self.requests[-1].content)


class FakeVideoCapture:
    def __init__(self, index, opened=True, frame=None):
        self.index = index
        self.opened = opened
        self.frame = frame
        self.released = False

    def isOpened(self):
        return self.opened

    def read(self):
        if self.frame is None:
            return False, None
        return True, self.frame.copy()

    def release(self):
        self.released = True


class FakeCamera:
    """CameraAcquirer double used by controller and API tests."""

    instances = []

    def __init__(self, fail_open=False):
        self.fail_open = fail_open
        self.opened = False
        self.released = False
        FakeCamera.instances.append(self)

    def open(self):
        if self.fail_open:
            raise AcquisitionError("Could not access the camera. Please ensure permissions are granted.")
        self.opened = True

    def preview(self):
        return b"\xff\xd8preview"

    def snapshot(self):
        return CapturedImage(mime_type="image/jpeg", data=b"\xff\xd8snapshot")

    def release(self):
        self.released = True


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setattr(config, "API_KEY", "test-key")
    get_openai_client.cache_clear()
    yield "test-key"
    get_openai_client.cache_clear()


@pytest.fixture
def fake_api(monkeypatch, api_key):
    api = FakeCompletionAPI()
    transport = httpx.MockTransport(api.handler)
    real_openai = openai_client.OpenAI

    def build_client(**kwargs):
        return real_openai(http_client=httpx.Client(transport=transport), **kwargs)

    monkeypatch.setattr(openai_client, "OpenAI", build_client)
    return api


@pytest.fixture
def unconfigured_key(monkeypatch):
    monkeypatch.setattr(config, "API_KEY", "__NUTRI_AI_API_KEY__")
    get_openai_client.cache_clear()
    yield
    get_openai_client.cache_clear()


@pytest.fixture
def upload_image():
    return CapturedImage.from_upload(b"\x89PNG\r\n\x1a\nfake", "image/png")


@pytest.fixture
def fake_camera():
    FakeCamera.instances = []
    return FakeCamera


@pytest.fixture
def camera_frame():
    # left half white, right half black
    frame = np.zeros((40, 60, 3), dtype=np.uint8)
    frame[:, :30] = 255
    return frame
