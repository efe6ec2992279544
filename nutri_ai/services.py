"""Analysis pipeline: completion request followed by JSON extraction."""

import logging
import time
from typing import Any, Dict

from nutri_ai.acquire import CapturedImage
from nutri_ai.inference import request_completion
from nutri_ai.utils import extract_json

logger = logging.getLogger(__name__)


def analyze_image(image: CapturedImage) -> Dict[str, Any]:
    """Analyze image using the vision model and return the parsed nutrition object."""
    total_start = time.time()

    # STEP 1 — COMPLETION
    logger.info("[PIPELINE] Step 1: Requesting completion")
    completion_start = time.time()
    completion_text = request_completion(image)
    completion_ms = round((time.time() - completion_start) * 1000, 2)
    logger.info("[PIPELINE] Step 1: Completion received in %sms", completion_ms)

    # STEP 2 — EXTRACTION
    extract_start = time.time()
    result_json = extract_json(completion_text)
    extract_ms = round((time.time() - extract_start) * 1000, 2)
    logger.info(
        "[PIPELINE] Step 2: Extracted JSON with %s items in %sms",
        len(result_json.get("items") or []),
        extract_ms,
    )

    processing_times = {
        "completion_ms": completion_ms,
        "extract_ms": extract_ms,
        "total_ms": round((time.time() - total_start) * 1000, 2),
    }
    logger.info("[PIPELINE] analysis timings_ms=%s", processing_times)

    return {"result": result_json, "processing_times": processing_times}
