from .llm_backends import ChatGPTAssistant, MockAssistant

__all__ = [
    "ChatGPTAssistant",
    "MockAssistant",
]
