"""Tests for convert_to_ollama_messages."""

import copy

from ollama_stream.transform import IMAGE_PLACEHOLDER, convert_to_ollama_messages


def image_block(data: str) -> dict:
    return {
        "type": "image",
        "source": {"type": "base64", "media_type": "image/png", "data": data},
    }


class TestStringContent:
    def test_passes_through_roles(self):
        messages = [
            {"role": "user", "content": "Hello"},
            {"role": "assistant", "content": "Hi there"},
        ]
        assert convert_to_ollama_messages(messages) == messages

    def test_empty_history(self):
        assert convert_to_ollama_messages([]) == []


class TestUserBlocks:
    def test_text_blocks_joined_with_newline(self):
        result = convert_to_ollama_messages([{
            "role": "user",
            "content": [
                {"type": "text", "text": "first"},
                {"type": "text", "text": "second"},
            ],
        }])
        assert result == [{"role": "user", "content": "first\nsecond"}]

    def test_images_attached_as_base64(self):
        result = convert_to_ollama_messages([{
            "role": "user",
            "content": [
                {"type": "text", "text": "What is this?"},
                image_block("aGVsbG8="),
            ],
        }])
        assert result == [{
            "role": "user",
            "content": "What is this?\n",
            "images": ["aGVsbG8="],
        }]

    def test_tool_results_come_first(self):
        result = convert_to_ollama_messages([{
            "role": "user",
            "content": [
                {"type": "text", "text": "Continue."},
                {"type": "tool_result", "tool_use_id": "t1", "content": "file contents"},
            ],
        }])
        assert result == [
            {"role": "user", "content": "file contents"},
            {"role": "user", "content": "Continue."},
        ]

    def test_tool_result_blocks_with_image(self):
        result = convert_to_ollama_messages([{
            "role": "user",
            "content": [{
                "type": "tool_result",
                "tool_use_id": "t1",
                "content": [
                    {"type": "text", "text": "Screenshot taken"},
                    image_block("c2NyZWVu"),
                ],
            }],
        }])
        assert result == [{
            "role": "user",
            "content": f"Screenshot taken\n{IMAGE_PLACEHOLDER}",
            "images": ["c2NyZWVu"],
        }]

    def test_tool_result_without_content(self):
        result = convert_to_ollama_messages([{
            "role": "user",
            "content": [{"type": "tool_result", "tool_use_id": "t1"}],
        }])
        assert result == [{"role": "user", "content": ""}]


class TestAssistantBlocks:
    def test_tool_use_becomes_tool_calls(self):
        result = convert_to_ollama_messages([{
            "role": "assistant",
            "content": [
                {"type": "text", "text": "Reading the file."},
                {"type": "tool_use", "id": "t1", "name": "read_file", "input": {"path": "a.py"}},
            ],
        }])
        assert result == [{
            "role": "assistant",
            "content": "Reading the file.",
            "tool_calls": [{"function": {"name": "read_file", "arguments": {"path": "a.py"}}}],
        }]

    def test_tool_use_only_has_empty_content(self):
        result = convert_to_ollama_messages([{
            "role": "assistant",
            "content": [{"type": "tool_use", "id": "t1", "name": "ls", "input": {}}],
        }])
        assert result[0]["content"] == ""
        assert result[0]["tool_calls"][0]["function"]["name"] == "ls"


def test_input_not_mutated():
    messages = [{
        "role": "user",
        "content": [
            {"type": "tool_result", "tool_use_id": "t1", "content": [image_block("eA==")]},
            {"type": "text", "text": "ok"},
        ],
    }]
    snapshot = copy.deepcopy(messages)

    convert_to_ollama_messages(messages)

    assert messages == snapshot
