from __future__ import annotations

import typing

import click


def render_menu(
    choices: typing.Sequence[str],
    print_cb: typing.Callable[[str], None] = print,
) -> None:
    """
    1. AntiHunter - v5
    2. Custom .bin file
    """
    for idx, choice in enumerate(choices, start=1):
        print_cb(f"{idx}. {choice}")


def prompt_selection(text: str, count: int) -> int:
    """
    Ask till the operator enters a number between 1 and 'count'.
    Non numeric and out of range input is rejected and asked again.

    Return the selected index 1..count.
    """
    assert isinstance(count, int)
    assert count >= 1

    selection = click.prompt(
        f"{text} (1-{count})",
        type=click.IntRange(min=1, max=count),
    )
    assert isinstance(selection, int)
    return selection
