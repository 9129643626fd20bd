"""Interactive prompts for the configuration resolver."""

from typing import Callable, Optional, Sequence

import click

YES_ANSWERS = ("y", "yes", "true", "1")
NO_ANSWERS = ("n", "no", "false", "0")


def parse_yes_no(value) -> Optional[bool]:
    """Returns True/False for a yes/no answer, None when it is not one."""
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    clean = str(value).strip().lower()
    if clean in YES_ANSWERS:
        return True
    if clean in NO_ANSWERS:
        return False
    return None


class Prompter:
    """Asks the operator for missing settings on the terminal."""

    def __init__(self, console, prompt_func: Callable = click.prompt):
        self.console = console
        self.prompt = prompt_func

    def ask_choice(self, question: str, choices: Sequence[str]) -> str:
        self.console.print(f"[blue]{question}[/blue]")
        return self.prompt("Version", type=click.Choice(list(choices)), show_choices=True)

    def ask_yes_no(self, question: str, default: bool) -> bool:
        default_label = "yes" if default else "no"
        while True:
            answer = self.prompt(
                f"{question} [yes/no] (default: {default_label})",
                default="",
                show_default=False,
            )
            if not str(answer).strip():
                return default
            parsed = parse_yes_no(answer)
            if parsed is not None:
                return parsed
            self.console.print("[yellow]Please answer yes or no.[/yellow]")

    def ask_text(self, question: str) -> str:
        return str(self.prompt(question, default="", show_default=False)).strip()

    def ask_secret_twice(self, question: str) -> str:
        while True:
            first = self.prompt(question, default="", show_default=False, hide_input=True)
            second = self.prompt("Confirm", default="", show_default=False, hide_input=True)
            if not first:
                self.console.print("[yellow]Empty value not allowed.[/yellow]")
                continue
            if first != second:
                self.console.print("[yellow]Values do not match. Try again.[/yellow]")
                continue
            return first
