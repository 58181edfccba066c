from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from openai import OpenAIError

from gpt_builder.errors import UpstreamError
from gpt_builder.services.completion import (
    CLOSING_LINE,
    CompletionClient,
    build_messages,
    build_system_prompt,
)


def completion_response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def test_system_prompt_without_context():
    prompt = build_system_prompt("You are a pirate.", "")
    assert prompt == f"You are a pirate.\n\n{CLOSING_LINE}"


def test_system_prompt_with_context():
    prompt = build_system_prompt("You are a pirate.", "chunk one\n\nchunk two")
    assert prompt.startswith("You are a pirate.\n\nRelevant document context:\nchunk one\n\nchunk two")
    assert prompt.endswith(CLOSING_LINE)


def test_build_messages_orders_system_history_user():
    history = [{"role": "user", "content": "a"}, {"role": "assistant", "content": "b"}]
    messages = build_messages("inst", "", history, "c")
    assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
    assert messages[-1]["content"] == "c"


def test_build_messages_keeps_last_ten_history_entries():
    history = [{"role": "user", "content": str(i)} for i in range(25)]
    messages = build_messages("inst", "", history, "new")
    assert [m["content"] for m in messages[1:-1]] == [str(i) for i in range(15, 25)]


def test_complete_sends_max_tokens_and_returns_content():
    client = MagicMock()
    client.chat.completions.create.return_value = completion_response("Ahoy")
    completer = CompletionClient(client, model="anthropic/claude-3-haiku:beta")

    msgs = [{"role": "user", "content": "hi"}]
    assert completer.complete(msgs) == "Ahoy"
    client.chat.completions.create.assert_called_once_with(
        model="anthropic/claude-3-haiku:beta", messages=msgs, max_tokens=1500
    )


@pytest.mark.parametrize("response", [completion_response(None), completion_response(""), SimpleNamespace(choices=[])])
def test_complete_returns_none_for_empty_output(response):
    client = MagicMock()
    client.chat.completions.create.return_value = response
    assert CompletionClient(client, model="m").complete([]) is None


def test_complete_wraps_sdk_errors():
    client = MagicMock()
    client.chat.completions.create.side_effect = OpenAIError("rate limited")
    with pytest.raises(UpstreamError) as info:
        CompletionClient(client, model="m").complete([])
    assert info.value.status_code == 500
    assert info.value.detail == "rate limited"
