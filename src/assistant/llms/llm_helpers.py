import typing as t
from functools import lru_cache

import openai
from django.conf import settings
from pydantic import BaseModel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_random_exponential


@lru_cache(maxsize=None)
def get_openai_client() -> openai.OpenAI:
    """Get a standard OpenAI client."""
    return openai.OpenAI(api_key=settings.OPENAI_API_KEY)


T = t.TypeVar("T", bound=BaseModel)


@retry(
    wait=wait_random_exponential(multiplier=1, max=40),
    stop=stop_after_attempt(settings.LLM_MAX_RETRIES),
    retry=retry_if_exception_type((openai.APIConnectionError, openai.RateLimitError, openai.InternalServerError)),
    reraise=True,
)
def call_openai(model: str, system_prompt: str, user_prompt: str, output_schema: type[T]) -> T:
    """Thin wrapper around openai.responses.parse with retry & throttling.

    Transient errors (connection, rate limit, 5xx) are retried; anything else
    surfaces immediately.
    """
    client = get_openai_client()
    response = client.responses.parse(
        model=model,
        input=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        text_format=output_schema,
    )

    parsed_response = response.output_parsed
    if parsed_response is None:
        raise ValueError("The model returned no parsable output.")
    return parsed_response
