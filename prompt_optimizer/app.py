"""Command-line entry point for the prompt optimizer."""

import argparse
import logging
import sys

from prompt_optimizer.config import Config
from prompt_optimizer.optimizer.orchestrator import PromptOptimizer
from prompt_optimizer.reporter import display_result, to_json

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prompt_optimizer",
        description="Analyze a prompt and rewrite it with deterministic improvement patterns.",
    )
    parser.add_argument("prompt", nargs="?", help="Prompt text (read from stdin when omitted)")
    parser.add_argument(
        "--mode",
        choices=("fast", "deep", "auto"),
        help="Analysis mode; auto lets triage decide (default: from config)",
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    return parser


def load_config(path: str) -> Config | None:
    """Load configuration, or None to run with built-in defaults."""
    try:
        return Config(path)
    except FileNotFoundError:
        logger.warning(f"Configuration file not found: {path}. Using defaults.")
        return None


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the command line."""
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.config)
        if config is not None:
            optimizer = PromptOptimizer.from_config(config)
            default_mode = config.default_mode
            output_format = config.output_format
        else:
            optimizer = PromptOptimizer()
            default_mode = "fast"
            output_format = "text"

        if args.mode is None:
            mode = default_mode
        else:
            mode = None if args.mode == "auto" else args.mode
        if args.json:
            output_format = "json"

        prompt = args.prompt if args.prompt is not None else sys.stdin.read()
        result = optimizer.improve(prompt.strip(), mode=mode)

        if output_format == "json":
            print(to_json(result))
        else:
            display_result(result)

    except Exception as e:
        logger.error(f"Failed to improve prompt: {e}", exc_info=True)
        print(f"\nError improving prompt: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
