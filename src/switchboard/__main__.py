"""CLI entry point for switchboard.

This module provides the command-line interface. It can be invoked as
`switchboard` (via the script entry point) or `python -m switchboard`.

Commands:
    serve   Start the HTTP server (uvicorn)
    run     Run one prompt in-process and print the step-by-step progress
"""

import argparse
import asyncio
import logging
import sys

import uvicorn

from switchboard import __version__, create_app
from switchboard.config import SwitchboardSettings
from switchboard.console import StepPrinter, format_result
from switchboard.engine import create_http_client, create_runner
from switchboard.errors import UnknownAgentError
from switchboard.ollama import OllamaClient

DEFAULT_PROMPT = "When did sharks first appear?"


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--ollama-host",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via SWITCHBOARD_OLLAMA_HOST)",
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model used by specialist agents (can be set via SWITCHBOARD_MODEL)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via SWITCHBOARD_LOG_LEVEL)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the serve and run commands."""
    parser = argparse.ArgumentParser(
        prog="switchboard",
        description="Multi-agent orchestration with streamed step events",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"switchboard {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Start the HTTP server")
    serve.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via SWITCHBOARD_HOST)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via SWITCHBOARD_PORT)",
    )
    serve.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development (uvicorn --reload)",
    )
    _add_common_arguments(serve)

    run = subparsers.add_parser("run", help="Run one prompt and print its progress")
    run.add_argument("words", nargs="*", help="Prompt text")
    run.add_argument("-p", "--prompt", type=str, default=None, help="Prompt text")
    run.add_argument(
        "--agent",
        type=str,
        default=None,
        help="Agent that receives the prompt first (default: Orchestrator)",
    )
    _add_common_arguments(run)

    return parser


def build_settings(args: argparse.Namespace) -> SwitchboardSettings:
    """Build settings; CLI arguments override environment variables."""
    settings_kwargs = {}
    for name in ("host", "port", "ollama_host", "model", "log_level"):
        value = getattr(args, name, None)
        if value is not None:
            settings_kwargs[name] = value
    if getattr(args, "agent", None):
        settings_kwargs["root_agent"] = args.agent
    return SwitchboardSettings(**settings_kwargs)


def resolve_prompt(args: argparse.Namespace) -> str:
    """Get the prompt from --prompt, positional words, or stdin."""
    from_cli = args.prompt or " ".join(args.words).strip()
    if from_cli:
        return from_cli
    try:
        answer = input("Prompt: ")
    except EOFError:
        answer = ""
    return answer.strip() or DEFAULT_PROMPT


async def run_once(settings: SwitchboardSettings, prompt: str) -> int:
    """Run one prompt and print progress, final output and usage.

    Returns:
        int: Process exit code (0 on success, 1 on a failed run)
    """
    ollama_client = OllamaClient(host=settings.ollama_host)
    http_client = create_http_client(settings)
    try:
        runner = create_runner(settings, ollama_client, http_client)
        try:
            stream = runner.run(prompt, settings.root_agent)
        except UnknownAgentError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 2

        print("\n--- Run started ---")
        print("Prompt:", prompt)
        print("")

        printer = StepPrinter()
        async for event in stream:
            line = printer.format(event)
            if line is not None:
                print(line)

        result = await stream.result()
        print(format_result(result))
        return 0 if result.succeeded else 1
    finally:
        await http_client.aclose()
        await ollama_client.close()


def main() -> int:
    """Main entry point for the switchboard CLI."""
    parser = build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 1

    settings = build_settings(args)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "run":
        prompt = resolve_prompt(args)
        return asyncio.run(run_once(settings, prompt))

    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=args.reload,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
