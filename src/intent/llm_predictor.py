"""Optional LLM-backed intent predictor (feature-flagged).

The LLM is only asked for a single intent label. Its answer is parsed by the classifier and any
label outside the closed intent set falls back to the keyword rules.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen


class IntentPredictorError(RuntimeError):
    """Raised when the predictor cannot return a label."""


@dataclass(frozen=True)
class LLMConfig:
    """Configuration for the OpenAI-style Chat Completions API call."""

    api_key: str
    model: str = "gpt-4o-mini"
    api_base: str = "https://api.openai.com/v1"
    timeout_s: float = 30.0


def _load_prompt() -> str:
    prompt_path = Path(__file__).resolve().parent / "prompt_intent_v1.md"
    return prompt_path.read_text(encoding="utf-8")


def _strip_code_fences(text: str) -> str:
    value = (text or "").strip()
    if value.startswith("```"):
        value = value.strip("`")
        value = value.removeprefix("json").strip()
    return value


def _chat_completions_url(api_base: str) -> str:
    return api_base.rstrip("/") + "/chat/completions"


def _label_from_content(content: str) -> str:
    """Accept either a bare label or a JSON object `{"intent": "<label>"}`."""

    value = _strip_code_fences(content)
    if value.startswith("{"):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError as exc:
            raise IntentPredictorError("LLM returned malformed JSON") from exc
        if not isinstance(decoded, dict):
            raise IntentPredictorError("LLM returned unexpected JSON")
        value = str(decoded.get("intent") or "")
    return value.strip().strip('"')


class LLMIntentPredictor:
    """`IntentPredictor` backed by an OpenAI-compatible `/chat/completions` endpoint."""

    def __init__(self, config: LLMConfig) -> None:
        self._config = config
        self._prompt = _load_prompt()

    def _complete(self, user_text: str) -> bytes:
        payload = {
            "model": self._config.model,
            "temperature": 0,
            "messages": [
                {"role": "system", "content": self._prompt},
                {"role": "user", "content": user_text},
            ],
        }

        req = Request(
            _chat_completions_url(self._config.api_base),
            method="POST",
            headers={
                "Authorization": f"Bearer {self._config.api_key}",
                "Content-Type": "application/json",
            },
            data=json.dumps(payload).encode(),
        )

        try:
            with urlopen(req, timeout=self._config.timeout_s) as resp:  # noqa: S310 (feature-flagged network call)
                return resp.read()
        except HTTPError as exc:
            raise IntentPredictorError(f"LLM HTTP error: {exc.code}") from exc
        except URLError as exc:
            raise IntentPredictorError("LLM connection error") from exc
        except TimeoutError as exc:
            raise IntentPredictorError("LLM request timed out") from exc
        except OSError as exc:
            raise IntentPredictorError("LLM transport error") from exc

    def predict(self, text: str) -> str:
        """Return the raw label predicted for `text`.

        Raises:
            IntentPredictorError: On transport failures or an unexpected response shape.
        """

        body = self._complete(text)
        try:
            decoded = json.loads(body)
            content = decoded["choices"][0]["message"]["content"]
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as exc:
            raise IntentPredictorError("Unexpected LLM response format") from exc

        label = _label_from_content(content)
        if not label:
            raise IntentPredictorError("LLM returned an empty label")
        return label


def llm_config_from_env(*, api_key: str | None = None) -> LLMConfig:
    """Build LLM config from environment variables.

    Environment variables (optional):
        - LLM_MODEL
        - LLM_API_BASE
        - LLM_TIMEOUT_S
    """

    key = api_key or os.getenv("LLM_API_KEY") or ""
    if not key:
        raise IntentPredictorError("LLM_API_KEY is required")

    timeout_s = float(os.getenv("LLM_TIMEOUT_S") or "30")
    return LLMConfig(
        api_key=key,
        model=os.getenv("LLM_MODEL") or "gpt-4o-mini",
        api_base=os.getenv("LLM_API_BASE") or "https://api.openai.com/v1",
        timeout_s=timeout_s,
    )
