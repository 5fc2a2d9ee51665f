"""Gemini client helpers shared by the AI-backed services."""

import json
import time

from google import genai

from prepdeck.config import GEMINI_API_KEY


def get_gemini_client():
    """Return a Gemini client, or None when no API key is configured."""
    if not GEMINI_API_KEY:
        return None
    return genai.Client(api_key=GEMINI_API_KEY)


def _is_retryable(e: Exception) -> tuple[bool, bool]:
    """Classify an error as (retryable, rate_limited)."""
    error_str = str(e).lower()
    is_retryable = False
    is_rate_limit = False

    # Rate limit / quota errors (429)
    if "429" in error_str or "resource exhausted" in error_str or "quota" in error_str or "rate limit" in error_str:
        is_retryable = True
        is_rate_limit = True

    # Service unavailable (503)
    if "503" in error_str or "unavailable" in error_str or "overloaded" in error_str:
        is_retryable = True

    status_code = getattr(e, "status_code", None) or getattr(e, "code", None)
    if status_code in [429, 503]:
        is_retryable = True
        is_rate_limit = status_code == 429

    return is_retryable, is_rate_limit


def call_gemini_with_retry(client, model, contents, config=None, max_retries=3, initial_delay=1, timeout=60, sleep=time.sleep):
    """
    Call Gemini API with retry logic for 503/429 errors and timeout.

    Args:
        client: Gemini client instance
        model: Model name to use
        contents: Prompt/content to send
        config: Optional GenerateContentConfig
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay in seconds before first retry
        timeout: Maximum time in seconds for the entire operation

    Returns:
        Response from Gemini API

    Raises:
        Exception: If all retries fail, timeout, or non-retryable error occurs
    """
    start_time = time.time()

    for attempt in range(max_retries + 1):
        if time.time() - start_time > timeout:
            raise TimeoutError("Request timed out. The server is experiencing high load. Please try again in a few moments.")

        try:
            return client.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            is_retryable, is_rate_limit = _is_retryable(e)

            if is_retryable and attempt < max_retries:
                # Use longer delays for rate limits
                base_delay = initial_delay * 2 if is_rate_limit else initial_delay
                delay = min(base_delay * (2 ** attempt), 10)  # Cap at 10 seconds

                if time.time() - start_time + delay > timeout:
                    raise TimeoutError("Request timed out. The server is experiencing high load. Please try again in a few moments.") from e

                print(f"[Gemini] Retrying in {delay}s (attempt {attempt + 1}/{max_retries}) - {str(e)[:100]}")
                sleep(delay)
                continue
            raise


def extract_first_json_object(text: str) -> dict:
    """Extract the first JSON object from a model response."""
    if not isinstance(text, str):
        raise ValueError("Model response was not text")
    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end < 0 or end <= start:
        raise ValueError("No JSON object found in model response")
    candidate = text[start : end + 1]
    return json.loads(candidate)
