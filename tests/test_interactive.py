import os

from jellyrename.grouper import ShowGroup
from jellyrename.interactive import (
    confirm_group,
    confirm_proceed,
    prompt_movie,
    prompt_show,
    prompt_title_and_year,
    select_option,
)
from jellyrename.models import ClassifiedItem, Episode, MediaKind


def show_group(directory="/lib/My Show", name="My Show", year=None):
    items = [
        ClassifiedItem(
            path=os.path.join(directory, f"My.Show.S01E0{n}.mkv"),
            kind=MediaKind.TV_SHOW,
            episode=Episode(1, n),
        )
        for n in (1, 2)
    ]
    return ShowGroup(name=name, directory=directory, year=year, items=items)


MOVIE = ClassifiedItem(path="/lib/The.Matrix.1999.mkv", kind=MediaKind.MOVIE)


def test_confirm_proceed_repeats_until_answered(answers, capsys):
    answers("maybe", "YES")
    assert confirm_proceed("Go?")
    assert "Please enter 'y' or 'n'." in capsys.readouterr().out


def test_confirm_proceed_end_of_input_is_no(answers):
    answers()
    assert not confirm_proceed("Go?")


def test_select_option(answers):
    answers("")
    assert select_option(["a", "b"]) == 0
    answers("7", "x", "2")
    assert select_option(["a", "b"]) == 1
    answers("0")
    assert select_option(["a", "b"]) is None


def test_manual_entry_validates_title_and_year(answers, capsys):
    answers("", "New Show", "20", "2021")
    assert prompt_title_and_year("TV show") == ("New Show", 2021)
    out = capsys.readouterr().out
    assert "Title cannot be empty." in out
    assert "Year must be four digits" in out


def test_manual_entry_year_is_optional(answers):
    answers("New Show", "")
    assert prompt_title_and_year("TV show") == ("New Show", None)


def test_prompt_show_accepts_guess(answers, capsys):
    answers("")
    assert prompt_show([show_group(year=2019)]) == ("My Show", 2019)
    out = capsys.readouterr().out
    assert "My.Show.S01E02.mkv -> S01E02" in out
    assert 'Use "My Show (2019)"' in out


def test_prompt_show_manual_name(answers):
    answers("2", "Better Name", "2020")
    assert prompt_show([show_group()]) == ("Better Name", 2020)


def test_prompt_show_skip(answers):
    answers("0")
    assert prompt_show([show_group()]) is None


def test_prompt_movie(answers):
    answers("")
    assert prompt_movie(MOVIE, "The Matrix", 1999) == ("The Matrix", 1999)
    answers("2", "The Matrix Reloaded", "2003")
    assert prompt_movie(MOVIE, "The Matrix", 1999) == ("The Matrix Reloaded", 2003)


def test_prompt_movie_without_title(answers):
    answers("y", "Found Footage", "")
    assert prompt_movie(MOVIE, None, None) == ("Found Footage", None)
    answers("n")
    assert prompt_movie(MOVIE, None, None) is None


def test_confirm_group_lists_folders(answers, capsys):
    answers("n")
    groups = [show_group("/lib/My Show"), show_group("/lib/My.Show")]
    assert not confirm_group(groups)
    out = capsys.readouterr().out
    assert "'My Show' was found in 2 folders" in out
    assert "/lib/My.Show (2 files)" in out
