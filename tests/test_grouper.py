import os

from jellyrename.grouper import group_shows, guess_show, guess_show_name, show_directory
from jellyrename.models import ClassifiedItem, Episode, MediaKind


def episode_item(path: str, title: str | None = None, year: int | None = None) -> ClassifiedItem:
    return ClassifiedItem(
        path=path, kind=MediaKind.TV_SHOW, title=title, year=year, episode=Episode(1, 1)
    )


def test_season_folder_defers_to_parent():
    show = os.path.join("/lib", "My Show")
    assert show_directory(os.path.join(show, "Season 2")) == show
    assert show_directory(show) == show


def test_guess_show_cleans_folder_name():
    assert guess_show(os.path.join("/lib", "Breaking Bad (2008)", "Season 1")) == ("Breaking Bad", 2008)
    assert guess_show_name(os.path.join("/lib", "My.Show.S01.1080p")) == "My Show"


def test_season_folders_grouped_into_one_show():
    show = os.path.join("/lib", "My Show")
    items = [
        episode_item(os.path.join(show, "Season 1", "01.mkv")),
        episode_item(os.path.join(show, "Season Two", "01.mkv")),
        episode_item(os.path.join(show, "الموسم الثالث", "01.mkv")),
    ]
    groups = group_shows(items)
    assert list(groups) == ["my show"]
    assert len(groups["my show"]) == 1
    group = groups["my show"][0]
    assert group.name == "My Show"
    assert group.directory == show
    assert len(group.items) == 3


def test_same_name_in_different_folders():
    items = [
        episode_item(os.path.join("/a", "My Show", "01.mkv")),
        episode_item(os.path.join("/b", "my show", "02.mkv")),
    ]
    groups = group_shows(items)
    assert list(groups) == ["my show"]
    assert len(groups["my show"]) == 2


def test_loose_scene_files_grouped_by_title():
    root = os.path.join("/downloads")
    items = [
        episode_item(os.path.join(root, "Show.One.S01E01.mkv"), title="Show One"),
        episode_item(os.path.join(root, "Show.Two.S01E01.mkv"), title="Show Two"),
    ]
    groups = group_shows(items, scan_root=root)
    assert sorted(groups) == ["show one", "show two"]


def test_non_episodes_ignored():
    movie = ClassifiedItem(path="/lib/Movie (2000).mkv", kind=MediaKind.MOVIE, title="Movie", year=2000)
    assert group_shows([movie]) == {}
