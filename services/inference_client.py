"""Inference service client.

The inference service accepts a prompt plus a JSON schema and answers with
an object conforming to that schema. `HttpInferenceClient` talks to a hosted
endpoint configured through the environment; tests substitute their own
`InferenceClient`.
"""

import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from core.exceptions import ConfigurationError, RemoteOperationFailed
from core.logger import get_logger
from schemas.plan_schema import GenerationRequest

logger = get_logger("services.inference_client")

DEFAULT_TIMEOUT = 120


class InferenceClient(ABC):
    """Submits structured generation requests."""

    @abstractmethod
    def invoke(self, request: GenerationRequest) -> Dict[str, Any]:
        """Return the schema-conformant object for the request.

        Raises:
            RemoteOperationFailed: If the service rejects the request.
        """


class HttpInferenceClient(InferenceClient):
    """POSTs `{"prompt", "response_json_schema"}` to a hosted LLM endpoint."""

    def __init__(self, url: str, api_key: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        if not url:
            raise ConfigurationError("Inference endpoint URL is not configured", config_key="INFERENCE_URL")
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls) -> "HttpInferenceClient":
        """Build a client from INFERENCE_URL, INFERENCE_API_KEY and INFERENCE_TIMEOUT."""
        try:
            timeout = float(os.getenv("INFERENCE_TIMEOUT", DEFAULT_TIMEOUT))
        except ValueError:
            raise ConfigurationError("INFERENCE_TIMEOUT must be a number", config_key="INFERENCE_TIMEOUT")
        return cls(os.getenv("INFERENCE_URL", ""), os.getenv("INFERENCE_API_KEY"), timeout)

    def invoke(self, request: GenerationRequest) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        payload = {"prompt": request.prompt, "response_json_schema": request.response_json_schema}

        logger.info("Invoking inference endpoint (%s chars of prompt)", len(request.prompt))
        try:
            response = self.session.post(self.url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            result = response.json()
        except requests.RequestException as exc:
            logger.error("Inference request failed: %s", exc)
            raise RemoteOperationFailed("inference", "invoke", str(exc)) from exc
        except ValueError as exc:
            logger.error("Inference response is not JSON: %s", exc)
            raise RemoteOperationFailed("inference", "invoke", "response is not valid JSON") from exc

        if not isinstance(result, dict):
            raise RemoteOperationFailed("inference", "invoke", "response is not a JSON object")
        return result
