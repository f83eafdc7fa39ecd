"""Terminal prompts used by ``jellyrename rename --interactive``.

Each prompt returns the user's choice, or None to skip.  End of input
always counts as skip, so piping the command into a script never hangs.
"""
import os

from .formatter import jellyfin_name
from .grouper import ShowGroup
from .models import ClassifiedItem


def ask(prompt: str) -> str | None:
    """Read one stripped line, None on end of input."""
    try:
        return input(prompt).strip()
    except EOFError:
        return None


def confirm_proceed(question: str) -> bool:
    """
    Ask the user a yes/no question on the terminal.

    Args:
        question: Prompt text without the "(y/n)" suffix

    Returns:
        True if user confirms, False otherwise (also on end of input)
    """
    while True:
        response = ask(f"\n{question} (y/n): ")
        if response is None:
            return False
        response = response.lower()
        if response in ('y', 'yes'):
            return True
        if response in ('n', 'no'):
            return False
        print("Please enter 'y' or 'n'.")


def prompt_title_and_year(kind: str) -> tuple[str, int | None] | None:
    """Manual entry: a non-empty title, then an optional year."""
    while True:
        title = ask(f"Enter {kind} title: ")
        if title is None:
            return None
        if title:
            break
        print("Title cannot be empty.")

    while True:
        year = ask("Enter year (optional): ")
        if not year:
            return title, None
        if year.isdigit() and len(year) == 4:
            return title, int(year)
        print("Year must be four digits, or leave it empty.")


def select_option(options: list[str]) -> int | None:
    """
    Print numbered options and read a choice.

    Args:
        options: Labels shown as 1..n; "0" always means skip

    Returns:
        Index into *options* (empty input picks the first), None to skip
    """
    for i, label in enumerate(options, 1):
        print(f"  {i}. {label}")
    print("  0. Skip these files")

    while True:
        choice = ask("Select [1]: ")
        if choice is None or choice == '0':
            return None
        if not choice:
            return 0
        if choice.isdigit() and 1 <= int(choice) <= len(options):
            return int(choice) - 1
        print("Invalid choice. Try again.")


def confirm_group(groups: list[ShowGroup]) -> bool:
    """Ask whether folders that guessed the same show name really are one show."""
    print(f"\n'{groups[0].name}' was found in {len(groups)} folders:")
    for group in groups:
        print(f"  {group.directory} ({len(group.items)} files)")
    return confirm_proceed("Treat them as one show?")


def prompt_show(groups: list[ShowGroup]) -> tuple[str, int | None] | None:
    """
    Let the user accept or replace the guessed name of a show.

    Args:
        groups: Folders treated as one show; the first one names it

    Returns:
        (title, year), or None to leave the episodes unrenamed
    """
    first = groups[0]
    items = [item for group in groups for item in group.items]
    folders = ", ".join(os.path.basename(g.directory) or g.directory for g in groups)
    print(f"\nFound {len(items)} episode files in {folders}:")
    for item in items:
        code = item.episode.episode_code if item.episode else "no episode number"
        print(f"  {os.path.basename(item.path)} -> {code}")

    options = [f'Use "{jellyfin_name(first.name, first.year)}"', "Enter different show name"]
    choice = select_option(options)
    if choice is None:
        return None
    if choice == 0:
        return first.name, first.year
    return prompt_title_and_year("TV show")


def prompt_movie(
    item: ClassifiedItem,
    title: str | None,
    year: int | None,
) -> tuple[str, int | None] | None:
    """Let the user accept the guessed movie title or type one in."""
    print(f"\nMovie file: {os.path.basename(item.path)}")
    if not title:
        print("  No usable title found.")
        if not confirm_proceed("Enter a title manually?"):
            return None
        return prompt_title_and_year("movie")

    choice = select_option([f'Use "{jellyfin_name(title, year)}"', "Enter different title"])
    if choice is None:
        return None
    if choice == 0:
        return title, year
    return prompt_title_and_year("movie")
