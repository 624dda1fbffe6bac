from pathlib import Path

import pytest

from line_sampler.data.paths import default_output_path, list_text_files


def test_default_output_path_sits_next_to_input():
    assert default_output_path(Path("/data/words.txt"), 25) == Path("/data/words_random25.txt")


def test_default_output_path_without_count():
    assert default_output_path(Path("notes.md"), None) == Path("notes_random.txt")


def test_list_text_files_sorted(tmp_path):
    (tmp_path / "b.txt").write_text("", encoding="utf-8")
    (tmp_path / "a.txt").write_text("", encoding="utf-8")
    (tmp_path / "c.csv").write_text("", encoding="utf-8")
    (tmp_path / "dir.txt").mkdir()
    assert list_text_files(tmp_path) == [tmp_path / "a.txt", tmp_path / "b.txt"]


def test_list_text_files_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        list_text_files(tmp_path / "nope")
