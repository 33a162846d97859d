from decouple import config

# Backend used by the assistant app. The mock backend returns canned text and is
# what local development and the test-suite run against.
#
# Production:
#   EVENT_ASSISTANT_BACKEND=assistant.llms.ChatGPTAssistant
#   OPENAI_API_KEY=sk-...
EVENT_ASSISTANT_BACKEND: str = config("EVENT_ASSISTANT_BACKEND", default="assistant.llms.MockAssistant")

OPENAI_API_KEY: str | None = config("OPENAI_API_KEY", default=None) or None

LLM_DEFAULT_MODEL: str = config("LLM_DEFAULT_MODEL", default="gpt-4.1-mini")

# Attempts per call before the assistant gives up and reports the service unavailable
LLM_MAX_RETRIES: int = config("LLM_MAX_RETRIES", default=4, cast=int)
