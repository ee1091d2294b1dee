import logging
import time
from functools import lru_cache
from typing import Any, Dict, List, Optional

import requests
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from hireline.core.config import AISettings, settings
from hireline.core.exceptions import AIKillSwitchError, ProviderError

logger = logging.getLogger(__name__)


class LLMClient:
    """
    Chat-completion client for an OpenAI-compatible provider.

    Built once per process from AISettings; timeout, retry budget and models
    are fixed for the client's lifetime.
    """

    def __init__(self, ai_settings: AISettings, session: Optional[requests.Session] = None):
        self.settings = ai_settings
        self.session = session or requests.Session()

    @property
    def completions_url(self) -> str:
        return self.settings.base_url.rstrip("/") + "/chat/completions"

    def _do_call(
        self,
        messages: List[Dict[str, str]],
        model_name: str,
        temperature: float,
        max_tokens: int,
        json_output: bool,
    ) -> str:
        """Single HTTP exchange; transport errors are left to the retry loop."""
        logger.info(f"Calling AI Model: {model_name}")
        payload: Dict[str, Any] = {
            "model": model_name,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_output:
            payload["response_format"] = {"type": "json_object"}

        response = self.session.post(
            self.completions_url,
            headers={
                "Authorization": f"Bearer {self.settings.api_key}",
                "Content-Type": "application/json",
            },
            json=payload,
            timeout=self.settings.timeout_seconds,
        )
        response.raise_for_status()
        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"AI service returned a malformed response: {e}")
        if content is None:
            raise ProviderError("AI service returned an empty message.")
        return content

    def _call_with_retries(self, *args) -> str:
        retrying = Retrying(
            stop=stop_after_attempt(max(0, self.settings.max_retries) + 1),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type((requests.exceptions.ConnectionError, requests.exceptions.Timeout)),
            reraise=True,
        )
        try:
            return retrying(self._do_call, *args)
        except ProviderError:
            raise
        except requests.exceptions.Timeout:
            logger.error("AI service timeout.")
            raise ProviderError("AI service reached timeout limit.")
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else "unknown"
            logger.error(f"AI service HTTP error: {e}")
            raise ProviderError(f"AI service returned error: {status_code}", details={"status_code": status_code})
        except requests.exceptions.RequestException as e:
            logger.error(f"AI service request failed: {e}")
            raise ProviderError(f"AI service error: {e}")

    def chat_completion(
        self,
        system_prompt: str,
        user_content: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_output: Optional[bool] = None,
    ) -> str:
        """
        Send one system + user exchange and return the message content.

        Tries the primary model (with retries), then the fallback model if one
        is configured.

        Raises:
            ProviderError: Missing configuration, kill switch, timeout, HTTP or
                transport failure on every model tried.
        """
        if self.settings.kill_switch:
            logger.warning("AI Kill-switch is active. Blocking request.")
            raise AIKillSwitchError()

        if not self.settings.api_key:
            logger.error("LLM API key missing.")
            raise ProviderError("AI service configuration error.")

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ]
        args = (
            temperature if temperature is not None else self.settings.temperature,
            max_tokens if max_tokens is not None else self.settings.max_tokens,
            self.settings.force_json if json_output is None else json_output,
        )

        started = time.perf_counter()
        try:
            content = self._call_with_retries(messages, self.settings.model_name, *args)
        except ProviderError as e:
            fallback = self.settings.fallback_model
            if not fallback or isinstance(e, AIKillSwitchError):
                raise
            logger.warning(f"Primary model {self.settings.model_name} failed: {e.message}. Attempting fallback.")
            try:
                content = self._call_with_retries(messages, fallback, *args)
            except ProviderError as fe:
                logger.error(f"Fallback model {fallback} also failed: {fe.message}")
                raise ProviderError(
                    f"AI service completely unavailable (Primary: {e.message}, Fallback: {fe.message})"
                )
        logger.info(f"AI response received in {(time.perf_counter() - started) * 1000:.0f}ms")
        return content


@lru_cache(maxsize=1)
def get_llm_client() -> LLMClient:
    """Process-wide provider client (FastAPI dependency)."""
    return LLMClient(settings.ai)
