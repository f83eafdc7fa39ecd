import pytest

from jellyrename.config import DEFAULT_CONFIG
from jellyrename.models import Episode
from jellyrename.parser import EPISODE_RULES, PathContext, extract_episode, split_path


@pytest.mark.parametrize("path, season, start, end", [
    # Scene codes
    ("My.Show.S02E05.mkv", 2, 5, None),
    ("My.Show.S03E01-E02.mkv", 3, 1, 2),
    ("My.Show.S03E03-04.mkv", 3, 3, 4),
    ("My.Show.S03E01E02.mkv", 3, 1, 2),
    ("My.Show.S02E01.1080p.mkv", 2, 1, None),
    ("My.Show.S01E06.5.mkv", 1, 6.5, None),
    # Three digit codes
    ("My.Show.205.mkv", 2, 5, None),
    ("My.Show.323-24.mkv", 3, 23, 24),
    ("My.Show.205.720p.mkv", 2, 5, None),
    ("Show.Name.112.1080p.WEB.mkv", 1, 12, None),
    # Season folders
    ("Season 04/08.mkv", 4, 8, None),
    ("Season 5/09-10.mkv", 5, 9, 10),
    ("season one/01.mkv", 1, 1, None),
    ("first season/01.mkv", 1, 1, None),
    ("الموسم الثاني/03.mkv", 2, 3, None),
    ("path/to/My Show/Season 1/MyShow1.mp4", 1, 1, None),
    # Episode words and markers
    ("My Show - episode 01.mkv", 1, 1, None),
    ("Season 2/My Show - episode 01.mkv", 2, 1, None),
    ("My Show - episode 0.mkv", 1, 0, None),
    ("My Show - e3.mkv", 1, 3, None),
    ("Season 3/My Show - e03.mkv", 3, 3, None),
    ("My Show - الحلقة 1.mkv", 1, 1, None),
    ("My Show/MS EP 05 FHD.mp4", 1, 5, None),
    ("Show100/Show100 EP 03.mp4", 1, 3, None),
    ("TDA/TDA EP26 END [BD - 1080p - X265].mkv", 1, 26, None),
    # Brackets
    ("My Show [01].mkv", 1, 1, None),
    # Anime release groups
    ("[RG] MyShow - 01 [Web-DL - 1080p - X265].mkv", 1, 1, None),
    ("My Show/[ReleaseGroup] MyShow - 01 [Web-DL - 1080p - X265].mkv", 1, 1, None),
    ("My Show/[RG]My_Show_-_01_(Dual Audio_10bit_1080p_x265).mkv", 1, 1, None),
    ("My Long Show/[ReleaseGroup] My L Show - 01 [Web-DL - 1080p - X265].mkv", 1, 1, None),
    ("My Very Long Show/[ReleaseGroup] M-VL'sS  - 01 [Web-DL - 1080p - X265].mkv", 1, 1, None),
    ("My Show/[ReleaseGroup] YS - 12 END (BD 1920x1080 x.264 DTS.mkv", 1, 12, None),
    # Fuzzy-confirmed title followed by a number
    ("My Show/My Show-01.mp4", 1, 1, None),
    ("My Show S2/MS S2 - 01 [Web-DL - 1080p - X265].mkv", 2, 1, None),
    ("my japanese show/MJS - 01 [Web-DL - 1080p - X265].mkv", 1, 1, None),
    ("My Other Show/MOS - 01 [Bluray - 1080p - Ar - X265].mkv", 1, 1, None),
    ("Another Show Extra/ASE - 01  [Bluray - 1080p - Ar - X265].mkv", 1, 1, None),
    ("Spaced Show Extra/S S E - 01 [BLURAY - 720P - AR - X265].mkv", 1, 1, None),
    ("My Show/MyShow10.mp4", 1, 10, None),
    ("My Show/MyShowEND12.mp4", 1, 12, None),
    ("Naruto shippuden/NarutoShippuuden307.mp4", 1, 307, None),
    ("Yakusoku no Neverland/YakusokunoNeverland10.mp4", 1, 10, None),
    ("Yakusoku no Neverland/YakusokunoNeverlandEND12.mp4", 1, 12, None),
    # Absolute numbering
    ("Simple Show/001.mp4", 1, 1, None),
    ("One Piece/100.mp4", 1, 100, None),
    ("One Piece/200.mp4", 1, 200, None),
    ("One Piece/1000.mp4", 1, 1000, None),
])
def test_extract_episode(path, season, start, end):
    episode = extract_episode(path)
    assert episode == Episode(season, start, end)


@pytest.mark.parametrize("path", [
    "A normal file.mkv",
    "The.Matrix.1999.1080p.mkv",
    "Some Folder/Unrelated Title 05.mkv",
    "Movies/2012.mkv",
    "Top.Gear.E2021.mkv",
    "",
])
def test_no_episode(path):
    assert extract_episode(path) is None


def test_windows_separators():
    assert extract_episode("Season 04\\08.mkv") == Episode(4, 8)


def test_season_hint_from_parent_token():
    assert extract_episode("My Show S3/[RG] My Show - 07.mkv") == Episode(3, 7)


def test_resolution_is_not_an_episode_code():
    # 1080p must never read as season 10 episode 80
    assert extract_episode("Some Show/Some Show 1080p.mkv") is None


def test_split_path():
    assert split_path("a/b/c.mkv") == ("b", "c.mkv")
    assert split_path("c.mkv") == ("", "c.mkv")
    assert split_path("") == ("", "")


def test_rules_are_ordered():
    names = [name for name, _ in EPISODE_RULES]
    assert names[0] == "anime_release"
    assert names[-1] == "title_number"
    assert names.index("episode_code") < names.index("three_digit")


def test_context_season_hint_defaults_to_one():
    ctx = PathContext(stem="Title 05", parent="Title", config=DEFAULT_CONFIG)
    assert ctx.parent_season is None
    assert ctx.season_hint == 1


def test_episode_rejects_inverted_range():
    with pytest.raises(ValueError):
        Episode(1, 5, 3)


def test_episode_marker_skips_year_like_numbers():
    assert extract_episode("Top.Gear.E2021.E03.mkv") == Episode(1, 3)
