"""
CLI entry point.

Commands:
- chat: Interactive memory agent chat
- init: Initialize data directory
- health: Check model configuration

Flags:
- --debug: Enable debug logging to file
"""

import asyncio
import logging
import sys

from memoria.core.config import Settings, get_settings
from memoria.core.errors import ConfigurationError
from memoria.core.logging import get_logger, setup_logging

GREEN = "\033[32m"
RESET = "\033[0m"


def main() -> int:
    """Main entry point."""
    settings = get_settings()

    debug_mode = "--debug" in sys.argv
    if debug_mode:
        sys.argv.remove("--debug")

    # Always log to file; console only shows warnings so chat output stays clean
    log_level = logging.DEBUG if debug_mode else logging.INFO
    log_file = settings.data_dir / "memoria.log"
    setup_logging(level=log_level, log_file=log_file, console=False)
    logger = get_logger("cli")

    logger.info(f"Logging to {log_file}" + (" (debug mode)" if debug_mode else ""))

    if len(sys.argv) < 2:
        print("Usage: memoria [--debug] <command>")
        print("Commands: chat, init, health")
        print("Flags: --debug (enable debug logging to data/memoria.log)")
        return 1

    command = sys.argv[1]

    if command == "init":
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        settings.long_term_path.touch(exist_ok=True)
        logger.info(f"Initialized data directory: {settings.data_dir}")
        print(f"Created: {settings.data_dir}")
        return 0

    if command == "chat":
        logger.info("Starting CLI chat mode")
        return asyncio.run(_chat_loop(settings))

    if command == "health":
        return _health_check(settings)

    print(f"Unknown command: {command}")
    return 1


def _read_line() -> str | None:
    try:
        return input("You: ")
    except EOFError:
        return None


def _write_reply(text: str) -> None:
    print(f"{GREEN}AI: {text}{RESET}\n")


async def _chat_loop(settings: Settings) -> int:
    """Interactive CLI chat with the memory agent."""
    from memoria.core.agent_service import create_memory_agent

    logger = get_logger("cli.chat")

    try:
        agent = await create_memory_agent(settings)
    except ConfigurationError as e:
        logger.error(f"Startup failed: {e}")
        print(f"Error: {e}")
        return 1

    print("Memoria chat")
    print(f"Type '{settings.exit_command}' to quit.")
    print("-" * 40)

    try:
        await agent.run(_read_line, _write_reply)
    except KeyboardInterrupt:
        print()
    finally:
        await agent.close()

    print(f"{GREEN}Exiting...{RESET}")
    return 0


def _health_check(settings: Settings) -> int:
    """Check configured models against the registry."""
    from memoria.llm.litellm_adapter import ModelRegistry

    registry = ModelRegistry()
    ok = True

    wanted = [(settings.chat_model, "chat")]
    if settings.enable_semantic_memory:
        wanted.append((settings.embedding_model, "embedding"))

    for model_id, kind in wanted:
        try:
            model = registry.require(model_id, kind)
        except ConfigurationError as e:
            print(f"  {model_id}: {e}")
            ok = False
            continue
        status = "OK" if model.is_available else "missing credentials"
        ok = ok and model.is_available
        print(f"  {model_id} ({kind}): {status}")

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
