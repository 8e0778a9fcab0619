"""Lanecal: calendar layout and scheduling-conflict engine."""

from __future__ import annotations


def main() -> None:
    from .cli import main as cli_main

    cli_main()


__all__ = ["main"]
