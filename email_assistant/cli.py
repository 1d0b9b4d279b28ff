import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .ai_service import LLMAnalysisService, LLMSuggestionService
from .config import Config, load_config
from .controller import AppController
from .email_source import build_email_source
from .logging_config import setup_logging
from .models import AppSettings, Tone
from .settings_store import SettingsError, SettingsStore
from .theme import build_palette
from .views import render_panel, render_settings, render_tone_list

logger = logging.getLogger(__name__)

TONES = list(Tone)

HELP_TEXT = """\
Commands:
  tone <n|name>          select a tone (see 'tones')
  tones                  list the available tones
  instruct [text]        set the free-text instruction (empty clears it)
  apply                  generate new suggestions with the current tone/instruction
  back                   restore the previous suggestions
  email                  expand/collapse the original email
  theme                  toggle light/dark (turns off sync with system)
  settings               show the settings
  set <setting> <value>  change a setting, applied immediately
  reset                  restore default settings
  reload                 fetch and analyze the email again
  help                   show this help
  quit                   leave the panel
"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_tone(value: str) -> Tone:
    """Accept a 1-based index into the tone list or a tone name, ignoring case."""
    value = value.strip()
    if value.isdigit():
        index = int(value)
        if 1 <= index <= len(TONES):
            return TONES[index - 1]
        raise ValueError(f"Tone number must be between 1 and {len(TONES)}.")
    for tone in TONES:
        if tone.value.lower() == value.lower() or tone.name.lower() == value.lower():
            return tone
    raise ValueError(f"Unknown tone: {value!r}")


def build_controller(
    config: Config,
    email_path: Optional[Path] = None,
    settings: Optional[AppSettings] = None,
) -> AppController:
    return AppController(
        email_source=build_email_source(config, email_path),
        analysis_service=LLMAnalysisService(config),
        suggestion_service=LLMSuggestionService(config),
        settings_store=SettingsStore(settings),
    )


def _initial_settings(args: argparse.Namespace) -> AppSettings:
    settings = AppSettings()
    if args.count is not None:
        settings = SettingsStore(settings).update(suggestion_count=args.count)
    return settings


def print_panel(console: Console, controller: AppController) -> None:
    console.print(
        render_panel(
            controller.state,
            controller.settings_store.settings,
            controller.effective_theme,
        )
    )


# ---------------------------------------------------------------------------
# Interactive panel
# ---------------------------------------------------------------------------


async def handle_command(
    line: str, controller: AppController, console: Console
) -> bool:
    """
    Run one panel command. Returns False when the user asked to quit.
    """
    line = line.strip()
    if not line:
        return True

    command, _, rest = line.partition(" ")
    command = command.lower()
    rest = rest.strip()
    store = controller.settings_store
    palette = build_palette(store.settings, controller.effective_theme)

    if command in ("quit", "exit", "q"):
        return False

    if command == "help":
        console.print(HELP_TEXT, markup=False)
        return True

    if command == "tones":
        console.print(render_tone_list(TONES, controller.state.tone, palette))
        return True

    if command == "settings":
        console.print(render_settings(store.settings, palette))
        return True

    if command == "tone":
        try:
            controller.set_tone(parse_tone(rest))
        except ValueError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            return True
    elif command == "instruct":
        controller.set_instruction(rest)
    elif command == "apply":
        with console.status("Generating suggestions…"):
            await controller.apply_instructions()
    elif command == "back":
        if not controller.go_back():
            console.print("Nothing to go back to.")
            return True
    elif command == "email":
        controller.toggle_email_expanded()
    elif command == "theme":
        controller.toggle_theme()
    elif command == "set":
        name, _, value = rest.partition(" ")
        if not name:
            console.print("[red]Usage: set <setting> <value>[/red]")
            return True
        value = value.strip()
        try:
            store.update(**{name: value})
        except SettingsError as e:
            console.print(f"[red]Invalid setting {escape(repr(name))}:[/red] {escape(str(e))}")
            return True
        palette = build_palette(store.settings, controller.effective_theme)
        console.print(render_settings(store.settings, palette))
        return True
    elif command == "reset":
        store.reset()
    elif command == "reload":
        with console.status("Loading email…"):
            await controller.initial_load()
    else:
        console.print(f"[red]Unknown command: {escape(repr(command))}[/red] (type 'help')")
        return True

    print_panel(console, controller)
    return True


async def run_panel(controller: AppController, console: Console) -> None:
    with console.status("Loading email and analysis…"):
        await controller.initial_load()
    print_panel(console, controller)
    console.print("Type 'help' for commands.")

    while True:
        try:
            line = await asyncio.to_thread(console.input, "> ")
        except (EOFError, KeyboardInterrupt):
            console.print("")
            break
        if not await handle_command(line, controller, console):
            break


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_analyze(args: argparse.Namespace) -> None:
    config = load_config()
    setup_logging(_log_level(config, args), log_to_file=config.log_to_file)

    controller = build_controller(config, args.email_file, _initial_settings(args))
    if args.tone:
        controller.set_tone(parse_tone(args.tone))
    if args.instruction:
        controller.set_instruction(args.instruction)

    console = Console()
    with console.status("Loading email and analysis…"):
        asyncio.run(controller.initial_load())
    print_panel(console, controller)


def cmd_panel(args: argparse.Namespace) -> None:
    config = load_config()
    setup_logging(_log_level(config, args), log_to_file=config.log_to_file)

    controller = build_controller(config, args.email_file, _initial_settings(args))
    if args.tone:
        controller.set_tone(parse_tone(args.tone))

    asyncio.run(run_panel(controller, Console()))


def cmd_tones() -> None:
    console = Console()
    for i, tone in enumerate(TONES, start=1):
        console.print(f"{i:>2}. {tone.value}")


def _log_level(config: Config, args: argparse.Namespace) -> str:
    return "DEBUG" if args.verbose else config.log_level


# ---------------------------------------------------------------------------
# Main CLI entrypoint
# ---------------------------------------------------------------------------


def _add_common_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--email-file",
        type=Path,
        default=None,
        help="JSON file holding the email to open (default: EMAIL_PATH or the built-in mock).",
    )
    p.add_argument(
        "--count",
        type=int,
        default=None,
        help="Number of reply suggestions (1-10). Default: 3.",
    )
    p.add_argument(
        "--tone",
        type=str,
        default=None,
        help="Initial tone, by number or name (see 'tones').",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output.",
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="email-assistant",
        description="AI email assistant: analysis and reply suggestions for one email.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # analyze
    p_analyze = subparsers.add_parser(
        "analyze", help="Load and analyze the email, print the panel once."
    )
    _add_common_options(p_analyze)
    p_analyze.add_argument(
        "--instruction",
        type=str,
        default="",
        help="Free-text instruction for the suggestions.",
    )

    # panel
    p_panel = subparsers.add_parser("panel", help="Open the interactive panel.")
    _add_common_options(p_panel)

    # tones
    subparsers.add_parser("tones", help="List the available tones.")

    args = parser.parse_args()

    try:
        if args.command == "analyze":
            cmd_analyze(args)
        elif args.command == "panel":
            cmd_panel(args)
        elif args.command == "tones":
            cmd_tones()
        else:
            parser.error(f"Unknown command: {args.command!r}")
    except ValueError as e:
        parser.error(str(e))


if __name__ == "__main__":
    main()
