"""Formatter module for generating Jellyfin file and folder names."""
import os
import re

from .models import Episode


def sanitize_filename(name: str) -> str:
    """
    Remove or replace characters that are invalid in file names.

    Args:
        name: The name to sanitize

    Returns:
        Sanitized name safe for use as a filename
    """
    # A slash would create a directory, keep the words apart instead
    sanitized = re.sub(r'[/\\]', '-', name)
    # Characters not allowed in Windows filenames: : * ? " < > |
    sanitized = re.sub(r'[<>:"|?*]', '', sanitized)
    sanitized = re.sub(r'\s+', ' ', sanitized)
    # Remove leading/trailing dots and spaces
    return sanitized.strip('. ')


def format_episode_code(episode: Episode) -> str:
    """Format an episode as S01E05, S03E01-E02 or S01E06.5."""
    return episode.episode_code


def jellyfin_name(title: str, year: int | None = None) -> str:
    """Folder and file base name Jellyfin expects: "Title (Year)"."""
    base = sanitize_filename(title)
    return f"{base} ({year})" if year else base


def movie_target(output_root: str, title: str, year: int | None, extension: str) -> str:
    """<root>/Title (Year)/Title (Year).ext"""
    name = jellyfin_name(title, year)
    return os.path.join(output_root, name, f"{name}{extension}")


def season_folder(season_number: int) -> str:
    return f"Season {season_number:02d}"


def episode_target(
    output_root: str,
    show_name: str,
    episode: Episode,
    extension: str,
) -> str:
    """<root>/Show/Season 01/Show S01E05.ext"""
    return os.path.join(
        output_root,
        show_name,
        season_folder(episode.season_number),
        f"{show_name} {episode.episode_code}{extension}",
    )


def subtitle_target(
    video_target: str,
    extension: str,
    language: str | None = None,
) -> str:
    """
    Name a subtitle after the video it follows, flagged as default track.

    Args:
        video_target: Planned target path of the video
        extension: Subtitle extension including the dot
        language: Optional language suffix kept from the source ("en")

    Returns:
        "<video base>[.<language>].default<ext>" next to the video
    """
    base, _ = os.path.splitext(video_target)
    if language:
        base = f"{base}.{language}"
    return f"{base}.default{extension}"


def natural_sort_key(text: str) -> list:
    """Sort key that orders "Episode 2" before "Episode 10"."""
    return [
        (0, int(part), '') if part.isdigit() else (1, 0, part.lower())
        for part in re.split(r'(\d+)', str(text))
        if part
    ]


def build_tree(paths: list[str], root: str | None = None) -> str:
    """
    Render target paths as a box-drawing tree for previews.

    Args:
        paths: Target file paths
        root: Common root shown as the top line; paths are made relative to it

    Returns:
        The tree as a multi-line string (empty for no paths)
    """
    tree: dict = {}
    for path in paths:
        if root:
            path = os.path.relpath(path, root)
        parts = [p for p in re.split(r'[/\\]', path) if p]
        node = tree
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        if parts:
            node.setdefault(parts[-1], None)

    lines = [os.path.basename(os.path.normpath(root))] if root and tree else []

    def walk(node: dict, prefix: str) -> None:
        names = sorted(node, key=natural_sort_key)
        for i, name in enumerate(names):
            last = i == len(names) - 1
            lines.append(f"{prefix}{'└── ' if last else '├── '}{name}")
            if node[name] is not None:
                walk(node[name], prefix + ('    ' if last else '│   '))

    walk(tree, '')
    return '\n'.join(lines)
