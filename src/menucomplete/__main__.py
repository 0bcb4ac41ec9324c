"""Entry point for the menucomplete demo prompt."""

from __future__ import annotations

import argparse
import logging
import os


def main() -> None:
    parser = argparse.ArgumentParser(description="menucomplete: tab completion demo prompt")
    parser.add_argument("--settings", default=None, help="JSON settings file")
    parser.add_argument("--prompt", default="> ", help="Prompt text (default: '> ')")
    parser.add_argument("--base-path", default=None, help="Directory paths complete from")
    parser.add_argument("--log-file", default=None, help="Write log records here instead of stderr")
    parser.add_argument(
        "--log-level", default="warning", choices=["debug", "info", "warning", "error"]
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=args.log_file,
    )

    from menucomplete.settings import load_settings

    settings = load_settings(args.settings, defaults={"pathSeparator": os.sep})

    from menucomplete.console import ProcessConsole
    from menucomplete.context import EditorContext
    from menucomplete.line_buffer import LineBuffer
    from menucomplete.providers import CombinedCandidateProvider, CommandSpec
    from menucomplete.readline import LineReader

    provider = CombinedCandidateProvider(
        commands=[
            CommandSpec("cat", "Print files", ["Path", "Number"]),
            CommandSpec("cd", "Change directory", ["Path"]),
            CommandSpec("exit", "Leave the demo"),
            CommandSpec("ls", "List a directory", ["Path", "All", "Long"]),
        ],
        base_path=args.base_path,
    )

    with ProcessConsole() as console:
        ctx = EditorContext(
            buffer=LineBuffer(),
            console=console,
            provider=provider,
            settings=settings,
            prompt=args.prompt,
        )
        ctx.initial_y = console.cursor_row()
        reader = LineReader(ctx)
        while True:
            try:
                line = reader.read_line()
            except (EOFError, KeyboardInterrupt):
                break
            if line.strip() == "exit":
                break
            ctx.initial_y = console.write_lines([f"=> {line}"], ctx.initial_y) + 1


if __name__ == "__main__":
    main()
