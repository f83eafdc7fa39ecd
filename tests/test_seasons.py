import pytest

from jellyrename.seasons import is_season_dir, season_from_dir_name


@pytest.mark.parametrize("name, expected", [
    ("Season 2", 2),
    ("season  04", 4),
    ("S03", 3),
    ("s1", 1),
    ("Season One", 1),
    ("season twelve", 12),
    ("First Season", 1),
    ("Twentieth Season", 20),
    ("الموسم 2", 2),
    ("الموسم واحد", 1),
    ("الموسم الأول", 1),
    ("الموسم الثانى", 2),
    ("الموسم الحادي عشر", 11),
])
def test_season_folder_names(name, expected):
    assert season_from_dir_name(name) == expected


@pytest.mark.parametrize("name", [
    "",
    "Season 1 Extras",
    "Seasons",
    "My Show",
    "Season Zero",
    "S01E01",
])
def test_not_season_folders(name):
    assert season_from_dir_name(name) is None
    assert not is_season_dir(name)


def test_custom_tables_replace_defaults():
    assert season_from_dir_name("Season Uno", cardinals={"uno": 1}, ordinals={}) == 1
    assert season_from_dir_name("Season One", cardinals={"uno": 1}, ordinals={}) is None
