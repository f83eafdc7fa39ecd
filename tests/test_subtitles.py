from jellyrename.cleaner import normalize_subtitle_name
from jellyrename.subtitles import assign_subtitles, subtitle_language, subtitle_matches


def matches(video: str, subtitle: str) -> bool:
    return subtitle_matches(normalize_subtitle_name(video), normalize_subtitle_name(subtitle))


def test_same_name_matches():
    assert matches("Movie.mkv", "Movie.srt")
    assert matches("Movie.Name.mkv", "Movie.Name.en.srt")


def test_numeric_names_do_not_cross_match():
    assert not matches("10.mkv", "1.srt")
    assert not matches("1.mkv", "10.srt")


def test_episode_codes_decide():
    assert not matches("Show.S01E01.mkv", "S01E02.srt")
    assert matches("Show.S01E02.1080p.WEB.mkv", "show.s01e02.srt")


def test_different_episode_numbers_do_not_match():
    assert not matches("Show 05.mkv", "Show 06.srt")


def test_shared_tokens_match():
    assert matches("The.Great.Movie.2020.mkv", "Great Movie Directors Cut.srt")


def test_containment():
    assert matches("Movie.mkv", "Movie.Commentary.srt")
    assert not subtitle_matches("", "movie")


def test_subtitle_language():
    assert subtitle_language("/x/Movie.en.srt") == "en"
    assert subtitle_language("/x/Movie.ara.forced.srt") == "ara.forced"
    assert subtitle_language("/x/Movie.en.default.srt") == "en"
    assert subtitle_language("/x/Movie.srt") is None


def test_assign_prefers_exact_match():
    videos = ["/d/Show 1.mkv", "/d/Show 10.mkv"]
    subtitles = ["/d/Show 1.srt", "/d/Show 10.srt", "/d/Notes.srt"]
    assigned, unclaimed = assign_subtitles(videos, subtitles)
    assert assigned == {
        "/d/Show 1.mkv": ["/d/Show 1.srt"],
        "/d/Show 10.mkv": ["/d/Show 10.srt"],
    }
    assert unclaimed == ["/d/Notes.srt"]


def test_assign_claims_each_subtitle_once():
    videos = ["/d/Movie.mkv", "/d/Movie.Extended.mkv"]
    subtitles = ["/d/Movie.Extended.srt"]
    assigned, unclaimed = assign_subtitles(videos, subtitles)
    assert sum(len(v) for v in assigned.values()) == 1
    assert assigned["/d/Movie.Extended.mkv"] == ["/d/Movie.Extended.srt"]
    assert unclaimed == []
