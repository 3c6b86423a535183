"""CLI entry point for ollama-stream.

Smoke-test tool for an Ollama server: sends one prompt through OllamaHandler
and prints the normalized event stream.

Entry point:
    ollama-stream chat "prompt" [--model <id>] [--no-stream] [--retry]
    ollama-stream model [--model <id>] [--num-ctx <n>] [--json]
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from dotenv import load_dotenv

from ollama_stream.adapters.ollama import OllamaError, OllamaHandler
from ollama_stream.adapters.schema import TextChunk, UsageChunk
from ollama_stream.config import OllamaOptions, load_options_from_env
from ollama_stream.retry import complete_with_retry

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."


# ─────────────────────────────────────────────────────────────────────
# ARGUMENT PARSING
# ─────────────────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ollama-stream",
        description="Send a prompt to an Ollama server and print the response.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    sub = parser.add_subparsers(dest="command")

    # Connection options, accepted after either subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--base-url", default=None, help="Ollama base URL (env: OLLAMA_BASE_URL)")
    common.add_argument("--model", default=None, help="Model id (env: OLLAMA_MODEL_ID)")
    common.add_argument("--num-ctx", default=None, help="Context window override (env: OLLAMA_NUM_CTX)")

    # chat
    chat_p = sub.add_parser("chat", parents=[common], help="Send a single user prompt")
    chat_p.add_argument("prompt", help="User message")
    chat_p.add_argument("--system", default=DEFAULT_SYSTEM_PROMPT, help="System prompt")
    chat_p.add_argument("--timeout-ms", type=int, default=None, help="Request timeout (milliseconds)")
    chat_p.add_argument("--no-stream", action="store_true", help="Request a single complete response")
    chat_p.add_argument("--retry", action="store_true", help="Buffer the response and retry transient errors")

    # model
    model_p = sub.add_parser("model", parents=[common], help="Show the resolved model descriptor")
    model_p.add_argument("--json", action="store_true", dest="json_output", help="JSON output")

    return parser


def _resolve_options(args: argparse.Namespace) -> OllamaOptions:
    """Environment options, overridden by any flags given on the command line."""
    overrides = {}
    if args.base_url:
        overrides["ollama_base_url"] = args.base_url
    if args.model:
        overrides["ollama_model_id"] = args.model
    if args.num_ctx:
        overrides["ollama_api_options_ctx_num"] = args.num_ctx
    if getattr(args, "timeout_ms", None):
        overrides["request_timeout_ms"] = args.timeout_ms
    if getattr(args, "no_stream", False):
        overrides["ollama_stream_enabled"] = False
    return load_options_from_env().model_copy(update=overrides)


# ─────────────────────────────────────────────────────────────────────
# COMMANDS
# ─────────────────────────────────────────────────────────────────────


async def _cmd_chat(
    handler: OllamaHandler,
    prompt: str,
    system_prompt: str,
    use_retry: bool = False,
) -> int:
    """Send one prompt. Returns exit code."""
    messages = [{"role": "user", "content": prompt}]
    try:
        if use_retry:
            response = await complete_with_retry(handler, system_prompt, messages)
            sys.stdout.write(response.text)
            input_tokens, output_tokens = response.input_tokens, response.output_tokens
        else:
            input_tokens = output_tokens = 0
            async for chunk in handler.create_message(system_prompt, messages):
                if isinstance(chunk, TextChunk):
                    sys.stdout.write(chunk.text)
                    sys.stdout.flush()
                elif isinstance(chunk, UsageChunk):
                    input_tokens += chunk.input_tokens
                    output_tokens += chunk.output_tokens
    except OllamaError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    finally:
        await handler.aclose()

    sys.stdout.write("\n")
    print(f"Usage: {input_tokens} input / {output_tokens} output tokens", file=sys.stderr)
    return 0


def _cmd_model(handler: OllamaHandler, json_output: bool = False) -> int:
    """Print the model descriptor. Returns exit code."""
    descriptor = handler.get_model()
    if json_output:
        json.dump(descriptor.model_dump(), sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        print(descriptor.id or "(no model configured)")
        print(f"context window: {descriptor.info.context_window}")
    return 0


# ─────────────────────────────────────────────────────────────────────
# ENTRY POINT
# ─────────────────────────────────────────────────────────────────────


def main(argv: Optional[list[str]] = None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Logging
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s %(message)s", stream=sys.stderr)

    load_dotenv()

    handler = OllamaHandler(_resolve_options(args))

    if args.command == "chat":
        code = asyncio.run(_cmd_chat(
            handler,
            prompt=args.prompt,
            system_prompt=args.system,
            use_retry=args.retry,
        ))
    elif args.command == "model":
        code = _cmd_model(handler, json_output=args.json_output)
        asyncio.run(handler.aclose())
    else:
        parser.print_help()
        code = 1

    sys.exit(code)


if __name__ == "__main__":
    main()
