import pytest

from line_sampler.config import SamplerSettings, load_settings, save_settings


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / "missing.yaml")
    assert settings == SamplerSettings(input_path="", output_path="", count=10, include_timestamp=True)


def test_save_then_load(tmp_path):
    path = tmp_path / "conf" / "line_sampler.yaml"
    saved = SamplerSettings(
        input_path="/data/words.txt",
        output_path="/data/out/sample.txt",
        count=25,
        include_timestamp=False,
    )
    save_settings(saved, path)
    assert load_settings(path) == saved


def test_partial_file_fills_defaults(tmp_path):
    path = tmp_path / "line_sampler.yaml"
    path.write_text("count: 3\nunknown_key: 1\n", encoding="utf-8")
    settings = load_settings(path)
    assert settings.count == 3
    assert settings.include_timestamp is True
    assert settings.input_path == ""


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "line_sampler.yaml"
    path.write_text("", encoding="utf-8")
    assert load_settings(path) == SamplerSettings()


@pytest.mark.parametrize(
    "content, key",
    [
        ("count: 0\n", "count"),
        ("count: many\n", "count"),
        ("count: true\n", "count"),
        ("include_timestamp: maybe\n", "include_timestamp"),
        ("input_path: 12\n", "input_path"),
    ],
)
def test_invalid_values_name_the_key(tmp_path, content, key):
    path = tmp_path / "line_sampler.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError, match=key):
        load_settings(path)


def test_non_mapping_rejected(tmp_path):
    path = tmp_path / "line_sampler.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_settings(path)
