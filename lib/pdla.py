import json
import requests

from pathlib import Path
from pydantic import TypeAdapter, ValidationError

from config.settings import FAST_MODELS, USAGE_LIMIT_INDICATOR
from lib.errors import (
    MalformedModelResponse,
    ModelInvocationFailed,
    UsageLimitExceeded,
)
from type_defs.segments import PdlaSegment

pdla_segments_adapter = TypeAdapter(list[PdlaSegment])


def is_fast_model(model: str) -> bool:
    return model.strip().lower() in FAST_MODELS


def invocation_error(message: str) -> ModelInvocationFailed:
    if USAGE_LIMIT_INDICATOR in message.lower():
        return UsageLimitExceeded(message)

    return ModelInvocationFailed(message)


def parse_pdla_response(text: str) -> list[PdlaSegment]:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedModelResponse(f"Layout response is not json: {e}") from e

    if not isinstance(raw, list):
        raise MalformedModelResponse(
            f"Layout response must be a list, got {type(raw).__name__}"
        )

    try:
        return pdla_segments_adapter.validate_python(raw)
    except ValidationError as e:
        raise MalformedModelResponse(f"Layout response does not match schema: {e}") from e


def pdla_extraction(
    file_path: str | Path, model: str, url: str, timeout: int = 900
) -> str:
    """
    Sends one pdf batch to the layout analysis service.

    return -> raw response body.
    """

    file_path = Path(file_path)

    try:
        with open(file_path, "rb") as f:
            response = requests.post(
                url,
                files={"file": (file_path.name, f, "application/pdf")},
                data={"fast": str(is_fast_model(model)).lower()},
                timeout=timeout,
            )
    except requests.RequestException as e:
        raise invocation_error(f"Layout analysis request failed: {e}") from e

    if not response.ok:
        raise invocation_error(
            f"Layout analysis failed. Status: {response.status_code}, Body: {response.text}"
        )

    return response.text


class PdlaClient:
    def __init__(self, url: str, timeout: int = 900):
        self.url = url
        self.timeout = timeout

    def segment(self, file_path: Path, model: str) -> list[PdlaSegment]:
        print(f"[pdla] {Path(file_path).name} model={model}")
        response_text = pdla_extraction(file_path, model, self.url, self.timeout)

        return parse_pdla_response(response_text)
