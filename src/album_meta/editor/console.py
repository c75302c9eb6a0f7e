# src/album_meta/editor/console.py

"""Terminal line input for the edit session."""

from __future__ import annotations

import readline

from album_meta.editor.session import EditCancelled


class ConsoleReader:
    """Read lines from the terminal, with GNU readline line editing."""

    def read_line(self, prompt: str, text: str = "") -> str:
        if text:
            readline.set_startup_hook(lambda: readline.insert_text(text))
        try:
            return input(prompt)
        except (EOFError, KeyboardInterrupt) as exc:
            print()  # Newline after ^C/^D
            raise EditCancelled() from exc
        finally:
            readline.set_startup_hook()
