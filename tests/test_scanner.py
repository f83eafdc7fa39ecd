import pytest

from jellyrename.config import DEFAULT_CONFIG
from jellyrename.models import Episode, MediaKind
from jellyrename.scanner import ScanCancelled, ScanError, classify_file, scan_directory


@pytest.fixture
def library(make_files):
    root = make_files(
        "Library/My Show/Season 1/My.Show.S01E01.mkv",
        "Library/My Show/Season 1/My.Show.S01E01.en.srt",
        "Library/My Show/Season 1/My.Show.S01E02.mkv",
        "Library/My Show/Season 1/orphan.srt",
        "Library/The Matrix (1999)/The.Matrix.1999.1080p.mkv",
        "Library/The Matrix (1999)/The.Matrix.1999.1080p.srt",
        "Library/The Matrix (1999)/notes.txt",
        "Library/Random Clip.avi",
    )
    return (root / "Library").resolve()


def test_scan_classifies_videos(library):
    result = scan_directory(library)

    names = [p.rsplit("/", 1)[-1] for p in (i.path for i in result.items)]
    assert names == [
        "My.Show.S01E01.mkv",
        "My.Show.S01E02.mkv",
        "Random Clip.avi",
        "The.Matrix.1999.1080p.mkv",
    ]

    first, second, clip, movie = result.items
    assert first.kind is MediaKind.TV_SHOW
    assert first.episode == Episode(1, 1)
    assert second.episode == Episode(1, 2)
    assert clip.kind is MediaKind.UNKNOWN
    assert movie.kind is MediaKind.MOVIE
    assert (movie.title, movie.year) == ("The Matrix", 1999)
    assert movie.episode is None

    assert result.movies == [movie]
    assert result.needs_review == [clip]


def test_every_subtitle_accounted_once(library):
    result = scan_directory(library)

    claimed = [s for item in result.items for s in item.subtitle_paths]
    everything = claimed + list(result.unassociated_subtitles)
    found = sorted(str(p) for p in library.rglob("*.srt"))

    assert sorted(everything) == found
    assert len(set(everything)) == len(everything)
    assert result.subtitle_count == 3
    assert [s.rsplit("/", 1)[-1] for s in result.unassociated_subtitles] == ["orphan.srt"]
    assert result.items[0].subtitle_paths == (
        str(library / "My Show" / "Season 1" / "My.Show.S01E01.en.srt"),
    )


def test_top_level_files_see_root_as_parent(make_files):
    root = (make_files("One Piece/100.mp4") / "One Piece").resolve()
    item = scan_directory(root).items[0]
    assert item.kind is MediaKind.TV_SHOW
    assert item.episode == Episode(1, 100)


def test_classify_file_uses_relative_path(tmp_path):
    path = str(tmp_path / "Show" / "Season 3" / "05.mkv")
    item = classify_file(path, str(tmp_path), DEFAULT_CONFIG)
    assert item.episode == Episode(3, 5)


def test_progress_reported(library):
    calls = []
    scan_directory(library, on_progress=lambda i, total, path: calls.append((i, total)))
    assert calls == [(1, 4), (2, 4), (3, 4), (4, 4)]


def test_cancellation(library):
    with pytest.raises(ScanCancelled):
        scan_directory(library, is_cancelled=lambda: True)


def test_missing_root(tmp_path):
    with pytest.raises(ScanError):
        scan_directory(tmp_path / "missing")


def test_file_root(make_files):
    root = make_files("file.mkv")
    with pytest.raises(ScanError):
        scan_directory(root / "file.mkv")


def test_extra_extensions(make_files):
    root = make_files("Clips/Show.S01E01.ts")
    assert scan_directory(root / "Clips").items == ()

    config = DEFAULT_CONFIG.extended(video_extensions=["ts"])
    items = scan_directory(root / "Clips", config).items
    assert len(items) == 1
    assert items[0].episode == Episode(1, 1)
