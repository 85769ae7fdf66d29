"""Command line entry point for trying the adapter against a real backend."""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from .adapter import CompletionCompat, create_adapter
from .config import get_settings
from .exceptions import BackendError
from .models.legacy import LegacyCompletionRequest, LegacyMessage, LegacyStreamError
from .strategies import MultiStrategy
from .utils import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run a legacy completion request through the Responses API"
    )
    parser.add_argument("prompt", help="User prompt")
    parser.add_argument("-m", "--model", default="gpt-4.1-mini", help="Backend model name")
    parser.add_argument("-s", "--system", help="Optional system message")
    parser.add_argument("-n", type=int, default=None, help="Number of completions")
    parser.add_argument(
        "--strategy",
        choices=[strategy.value for strategy in MultiStrategy],
        help="Override COMPLETION_COMPAT_MULTI_STRATEGY",
    )
    parser.add_argument("--max-tokens", type=int, default=None)
    parser.add_argument("--temperature", type=float, default=None)
    parser.add_argument("--stream", action="store_true", help="Stream the completion")
    return parser


def build_request(args: argparse.Namespace) -> LegacyCompletionRequest:
    messages = []
    if args.system:
        messages.append(LegacyMessage(role="system", content=args.system))
    messages.append(LegacyMessage(role="user", content=args.prompt))
    return LegacyCompletionRequest(
        model=args.model,
        messages=messages,
        n=args.n,
        max_tokens=args.max_tokens,
        temperature=args.temperature,
    )


async def run(adapter: CompletionCompat, request: LegacyCompletionRequest, stream: bool) -> int:
    async with adapter:
        if not stream:
            response = await adapter.create_completion(request)
            print(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))
            return 0

        completion = await adapter.create_completion_stream(request)
        async with completion:
            async for chunk in completion:
                if isinstance(chunk, LegacyStreamError):
                    print(f"\nStream failed: {chunk.error}", file=sys.stderr)
                    return 1
                if not chunk.is_final:
                    print(chunk.choices[0].text, end="", flush=True)
        print()
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    if args.strategy:
        settings = settings.model_copy(update={"multi_strategy": MultiStrategy(args.strategy)})

    try:
        return asyncio.run(run(create_adapter(settings), build_request(args), args.stream))
    except BackendError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
