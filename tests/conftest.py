import pytest


@pytest.fixture
def make_files(tmp_path):
    """Create empty files below tmp_path from relative paths; returns tmp_path."""
    def _make(*relative_paths: str):
        for rel in relative_paths:
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"data")
        return tmp_path
    return _make


@pytest.fixture
def answers(monkeypatch):
    """Feed lines to input(); running out of lines behaves like end of input."""
    def _feed(*lines: str):
        pending = iter(lines)

        def fake_input(prompt=""):
            try:
                return next(pending)
            except StopIteration:
                raise EOFError from None
        monkeypatch.setattr("builtins.input", fake_input)
    return _feed
