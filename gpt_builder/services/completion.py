#gpt_builder/services/completion.py

from typing import Dict, List, Optional, Sequence

from openai import OpenAI, OpenAIError

from gpt_builder.errors import UpstreamError
from gpt_builder.utils.logging import logger

HISTORY_LIMIT = 10
DEFAULT_MAX_TOKENS = 1500

CLOSING_LINE = (
    "Please respond helpfully based on your instructions and any provided document context."
)


def build_system_prompt(instructions: str, context_text: str) -> str:
    parts = [instructions]
    if context_text:
        parts.append(f"Relevant document context:\n{context_text}")
    parts.append(CLOSING_LINE)
    return "\n\n".join(parts)


def build_messages(
    instructions: str,
    context_text: str,
    history: Optional[Sequence[Dict[str, str]]],
    message: str,
) -> List[Dict[str, str]]:
    """
    System prompt, then the last HISTORY_LIMIT history entries, then the new user turn.
    """
    recent = list(history or [])[-HISTORY_LIMIT:]
    return [
        {"role": "system", "content": build_system_prompt(instructions, context_text)},
        *({"role": m["role"], "content": m["content"]} for m in recent),
        {"role": "user", "content": message},
    ]


class CompletionClient:
    """Chat completions against an OpenAI-compatible endpoint (OpenRouter by default)."""

    def __init__(self, client: OpenAI, model: str, max_tokens: int = DEFAULT_MAX_TOKENS):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    def complete(self, messages: List[Dict[str, str]]) -> Optional[str]:
        logger.info(f"Requesting completion: model={self.model}, messages={len(messages)}")
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as exc:
            logger.exception(f"Chat completion failed: {exc}")
            raise UpstreamError("Failed to get AI response", detail=str(exc)) from exc

        if not resp.choices:
            logger.warning("Chat completion returned no choices")
            return None
        content = resp.choices[0].message.content
        logger.info(f"Chat completion received: answer_len={len(content or '')}")
        return content or None
