#!/usr/bin/env python3
"""CLI entry point for the file agent."""

import argparse
import asyncio
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from agent.config import load_config, require_endpoint, resolve_model_name
from agent.exceptions import ConfigError
from cli.cli_app import CLIApp


def main():
    parser = argparse.ArgumentParser(description="Chat with a model that can work on local files.")
    parser.add_argument("--model", "-m", default=None, help="Model name (overrides LLM_MODEL)")
    parser.add_argument("--config", "-c", default="config.json", help="Path to a JSON config file")
    args = parser.parse_args()

    try:
        config = load_config(args.config)
        config.chat_model.model_name = resolve_model_name(args.model, config)
        require_endpoint(config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    app = CLIApp(config)
    asyncio.run(app.run())


if __name__ == "__main__":
    main()
