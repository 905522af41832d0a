# cli/menu_helpers.py

"""
Helper functions for CLI menus and user interaction in the student records application.

This module provides utilities for:
- Displaying interactive menus and result lists
- Prompting for user input and numbered selections

These functions are shared by the menu actions in `cli.main` to keep console behavior consistent.
"""

from enum import Enum
from typing import Any, Callable, Iterable


class MenuSignal(Enum):
    CANCEL = "CANCEL"
    EXIT = "EXIT"


# === display methods ===


def display_menu(
    title: str,
    options: list[tuple[str, Callable[..., Any]]],
    zero_option: str = "Return",
) -> MenuSignal | Callable[..., Any]:
    """
    Displays a numbered CLI menu and returns the selected action.

    Args:
        title (str): The heading displayed above the menu options.
        options (list[tuple[str, Callable[..., Any]]]): A list of (label, action) pairs to present.
        zero_option (str, optional): The label for the "exit" option. Defaults to "Return".

    Returns:
        MenuSignal.EXIT if the user selects the zero option.
        Callable[..., Any]: The function associated with the selected menu item.

    Notes:
        - Menu selection is repeated until a valid choice is made.
        - User input is matched by menu index, not by label.
    """
    while True:
        print(f"\n{title}")

        for i, (label, _) in enumerate(options, 1):
            print(f"{i}. {label}")

        print(f"0. {zero_option}")

        choice = prompt_user_input("请选择操作: ")

        if choice == "0":
            return MenuSignal.EXIT

        try:
            # casts choice to int and adjusts for zero-index, retrieves action from tuple
            index = int(choice) - 1
            if index < 0:
                raise IndexError(index)
            return options[index][1]

        except (ValueError, IndexError):
            print("无效选择，请重新输入！")


def display_results(
    results: Iterable[Any],
    show_index: bool = False,
    formatter: Callable[[Any], str] = lambda x: str(x),
) -> None:
    """
    Prints a list of results to the console, optionally numbered and formatted.

    Args:
        results (Iterable[Any]): A sequence of results to display.
        show_index (bool, optional): If True, prepends a bracketed index to each result. Defaults to False.
        formatter (Callable[[Any], str], optional): A function to convert each result to a display string. Defaults to str().
    """
    separator = "-" * 19

    for i, result in enumerate(results, 1):
        prefix = f"[{i}] " if show_index else ""
        print(f"{prefix}{formatter(result)}")
        print(separator)


# === prompt user input methods ===


# Prompt Helpers
#
# - `prompt_user_input()` is the base function, used by all others to standardize the UI format.
# - `prompt_user_input_or_cancel()` returns `MenuSignal.CANCEL` on blank input.


def prompt_user_input(prompt: str) -> str:
    return input(prompt).strip()


def prompt_user_input_or_cancel(prompt: str) -> str | MenuSignal:
    response = prompt_user_input(prompt)
    return MenuSignal.CANCEL if response == "" else response


def prompt_index_selection(items: list[Any], formatter: Callable[[Any], str]) -> int:
    """
    Shows a numbered list and asks the user for a 1-based index.

    Returns:
        The index as entered, which may be out of range; 0 if the input is not a number.
    """
    print(f"发现 {len(items)} 个同名学生：")

    display_results(items, True, formatter)

    choice = prompt_user_input("请输入要删除的学生编号: ")

    try:
        return int(choice)

    except ValueError:
        return 0
