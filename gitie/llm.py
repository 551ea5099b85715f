"""
OpenAI-compatible chat-completion client.

Only the narrow contract gitie needs: one system message, one user message,
and the text of the first choice back.
"""

import logging
import re
from typing import Optional

import requests

from gitie.errors import LlmRequestFailed

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60

THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)
CODE_FENCE = re.compile(r"^```[\w-]*\n(.*?)\n```$", re.DOTALL)


def clean_ai_output(text: str) -> str:
    """
    Strip reasoning blocks and a wrapping code fence from a model reply.

    Args:
        text: Raw message content returned by the model

    Returns:
        The cleaned text
    """
    cleaned = THINK_BLOCK.sub("", text).strip()
    fenced = CODE_FENCE.match(cleaned)
    if fenced:
        cleaned = fenced.group(1).strip()
    return cleaned


class ChatCompletionClient:
    def __init__(self, api_url: str, timeout: float = DEFAULT_TIMEOUT, session=None):
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests

    def complete(
        self,
        system_prompt: str,
        user_content: str,
        model: str,
        temperature: float,
        api_key: Optional[str] = None,
    ) -> str:
        """
        Send one chat-completion request and return the reply text.

        Args:
            system_prompt: Content of the system message
            user_content: Content of the user message
            model: Model name to request
            temperature: Sampling temperature
            api_key: Bearer token, sent only when non-empty

        Returns:
            Cleaned content of the first choice

        Raises:
            LlmRequestFailed: On network errors, timeouts, non-2xx replies,
                or replies without usable content
        """
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            "temperature": temperature,
            "stream": False,
        }
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        logger.debug(
            f"Sending chat completion to {self.api_url} (model={model}, "
            f"{len(user_content)} chars of user content)"
        )
        try:
            response = self.session.post(
                self.api_url, headers=headers, json=payload, timeout=self.timeout
            )
        except requests.Timeout as e:
            logger.error(f"AI request timed out after {self.timeout}s: {e}")
            raise LlmRequestFailed(f"AI service did not respond within {self.timeout} seconds") from e
        except requests.RequestException as e:
            logger.error(f"AI request failed during send: {e}")
            raise LlmRequestFailed(f"Failed to connect to AI service: {e}") from e

        if not 200 <= response.status_code < 300:
            body = response.text
            logger.error(f"AI service returned status {response.status_code}: {body}")
            raise LlmRequestFailed(f"AI service returned error ({response.status_code}): {body}")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except ValueError as e:
            logger.error(f"Failed to parse AI response as JSON: {e}")
            raise LlmRequestFailed(f"Failed to parse AI service response: {e}") from e
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"AI response has no usable choice: {e!r}")
            raise LlmRequestFailed("AI service response contained no choices") from e

        if not isinstance(content, str) or not content.strip():
            logger.warning("AI returned an empty message")
            raise LlmRequestFailed("AI returned an empty message")

        cleaned = clean_ai_output(content)
        if not cleaned:
            raise LlmRequestFailed("AI returned an empty message")
        logger.info("AI response received")
        logger.debug(f"AI response (first 100 chars): {cleaned[:100]!r}")
        return cleaned
