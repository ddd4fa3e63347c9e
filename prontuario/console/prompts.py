from __future__ import annotations


def ask(label: str) -> str:
    return input(label).strip()


def ask_int(label: str) -> int:
    """Prompt until the answer parses as an integer."""
    while True:
        raw = input(label).strip()
        try:
            return int(raw)
        except ValueError:
            print("Please enter a whole number.")
