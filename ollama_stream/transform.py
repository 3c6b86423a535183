"""
Conversion of Anthropic-style conversation messages to Ollama's chat format.

Anthropic content is either a plain string or a list of blocks:
    {"type": "text", "text": "..."}
    {"type": "image", "source": {"type": "base64", "media_type": "...", "data": "..."}}
    {"type": "tool_use", "id": "...", "name": "...", "input": {...}}
    {"type": "tool_result", "tool_use_id": "...", "content": str | [blocks]}

Ollama messages are {"role", "content", "images"?, "tool_calls"?}, where
images are bare base64 strings.
"""

IMAGE_PLACEHOLDER = "(see following user message for image)"


def _image_data(block: dict) -> str:
    return block.get("source", {}).get("data", "")


def _join_text(blocks: list[dict]) -> str:
    """Join text blocks with newlines; images contribute an empty line."""
    return "\n".join(
        "" if block.get("type") == "image" else block.get("text", "")
        for block in blocks
    )


def _convert_tool_result(block: dict) -> dict:
    content = block.get("content")
    images: list[str] = []
    if isinstance(content, str):
        text = content
    elif content:
        parts = []
        for part in content:
            if part.get("type") == "image":
                images.append(_image_data(part))
                parts.append(IMAGE_PLACEHOLDER)
            else:
                parts.append(part.get("text", ""))
        text = "\n".join(parts)
    else:
        text = ""

    message = {"role": "user", "content": text}
    if images:
        message["images"] = images
    return message


def _convert_user_blocks(blocks: list[dict]) -> list[dict]:
    tool_results = [b for b in blocks if b.get("type") == "tool_result"]
    others = [b for b in blocks if b.get("type") in ("text", "image")]

    # Tool results go first so they directly follow the assistant's tool call
    converted = [_convert_tool_result(b) for b in tool_results]

    if others:
        message = {"role": "user", "content": _join_text(others)}
        images = [_image_data(b) for b in others if b.get("type") == "image"]
        if images:
            message["images"] = images
        converted.append(message)
    return converted


def _convert_assistant_blocks(blocks: list[dict]) -> dict:
    others = [b for b in blocks if b.get("type") in ("text", "image")]
    tool_uses = [b for b in blocks if b.get("type") == "tool_use"]

    message = {"role": "assistant", "content": _join_text(others) if others else ""}
    if tool_uses:
        message["tool_calls"] = [
            {"function": {"name": b.get("name", ""), "arguments": b.get("input", {})}}
            for b in tool_uses
        ]
    return message


def convert_to_ollama_messages(messages: list[dict]) -> list[dict]:
    """
    Map Anthropic-style messages to Ollama chat messages.

    Pure function: the input list and its dicts are not modified.
    """
    converted: list[dict] = []
    for message in messages:
        role = message.get("role", "user")
        content = message.get("content")

        if isinstance(content, str):
            converted.append({"role": role, "content": content})
        elif role == "user":
            converted.extend(_convert_user_blocks(content or []))
        elif role == "assistant":
            converted.append(_convert_assistant_blocks(content or []))
    return converted
