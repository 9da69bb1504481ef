"""bangarang console entrypoint."""

from __future__ import annotations

from bangarang_console.app import run_app


def main() -> None:
    """Launch the Qt operator console."""
    run_app()


if __name__ == "__main__":
    main()
