"""
Tests for the template catalog, YAML template loading and generation config.
"""

from pathlib import Path

import pytest

from src.prompt_data.config import (
    DEFAULT_CITY_API_URL,
    JOB_TITLES,
    GenerationConfig,
    load_config,
)
from src.prompt_data.models import (
    AgeCityFilter,
    ConfigError,
    Confirmation,
    FixedCount,
    IndexPair,
    SelectionMode,
)
from src.prompt_data.templates import DEFAULT_TEMPLATES, load_templates

TEMPLATES_YAML = """
prompt_templates:
  - desc: first
    mode: fixed_count
    count: 3
    template: "Data:\\n${DataBlock}\\n\\nAges for:\\n${QueryItemsFormatted}"
  - desc: second
    mode: index_pair
    indices: [0, -1]
    template: "${DataBlock} ${QueryName1} ${QueryName2}"
  - desc: third
    mode: confirmation
    count: 4
    template: "${DataBlock} ${NonExistentName}"
  - desc: fourth
    mode: age_city_filter
    window: 3
    template: "${DataBlock} ${MinAge}-${MaxAge} ${TargetCity}"
"""


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_default_catalog_shape():
    descs = [t.desc for t in DEFAULT_TEMPLATES]
    assert len(descs) == 15
    assert len(set(descs)) == 15
    assert all("${DataBlock}" in t.template for t in DEFAULT_TEMPLATES)
    modes = {t.selection.mode for t in DEFAULT_TEMPLATES}
    assert modes == set(SelectionMode)


def test_job_catalog_has_no_duplicates():
    assert len(JOB_TITLES) == len(set(JOB_TITLES))


def test_load_templates_from_yaml(tmp_path):
    templates = load_templates(_write(tmp_path, "templates.yaml", TEMPLATES_YAML))

    assert [t.desc for t in templates] == ["first", "second", "third", "fourth"]
    assert templates[0].selection == FixedCount(count=3)
    assert templates[0].template.startswith("Data:\n${DataBlock}")
    assert templates[1].selection == IndexPair(first=0, second=-1)
    assert templates[2].selection == Confirmation(count=4, decoy_name="Slartibartfast")
    assert templates[3].selection == AgeCityFilter(window=3)


def test_unknown_mode_rejected(tmp_path):
    text = "prompt_templates:\n  - {desc: x, mode: lottery, template: '${DataBlock}'}\n"
    with pytest.raises(ConfigError, match="Unknown selection mode"):
        load_templates(_write(tmp_path, "bad.yaml", text))


def test_missing_mode_field_rejected(tmp_path):
    text = "prompt_templates:\n  - {desc: x, mode: fixed_count, template: '${DataBlock}'}\n"
    with pytest.raises(ConfigError):
        load_templates(_write(tmp_path, "bad.yaml", text))


def test_duplicate_desc_rejected(tmp_path):
    text = (
        "prompt_templates:\n"
        "  - {desc: x, mode: city_filter, template: '${DataBlock}'}\n"
        "  - {desc: x, mode: job_filter, template: '${DataBlock}'}\n"
    )
    with pytest.raises(ConfigError, match="Duplicate"):
        load_templates(_write(tmp_path, "dup.yaml", text))


def test_empty_template_file_rejected(tmp_path):
    with pytest.raises(ConfigError):
        load_templates(_write(tmp_path, "empty.yaml", ""))


def test_default_config_values():
    config = GenerationConfig()
    assert config.num_entries == 5000
    assert (config.min_age, config.max_age) == (18, 90)
    assert config.city_api_url == DEFAULT_CITY_API_URL
    assert config.num_cities_to_fetch == 150
    assert config.target_unique_cities == 100
    assert config.api_request_delay == pytest.approx(0.1)
    config.validate()


def test_load_config_from_yaml(tmp_path, monkeypatch):
    monkeypatch.delenv("PROMPT_DATA_CITY_API_URL", raising=False)
    monkeypatch.delenv("PROMPT_DATA_OUTPUT_DIR", raising=False)
    path = _write(
        tmp_path,
        "generation.yaml",
        "generation:\n  num_entries: 250\n  random_seed: 9\n  output_dir: out\n",
    )

    config = load_config(path, env_file=tmp_path / "missing.env")

    assert config.num_entries == 250
    assert config.random_seed == 9
    assert config.output_dir == "out"
    assert config.max_age == 90


def test_environment_overrides_yaml(tmp_path, monkeypatch):
    monkeypatch.setenv("PROMPT_DATA_OUTPUT_DIR", "from-env")
    monkeypatch.setenv("PROMPT_DATA_CITY_API_URL", "http://cities.test/random")
    path = _write(tmp_path, "generation.yaml", "output_dir: from-yaml\n")

    config = load_config(path, env_file=tmp_path / "missing.env")

    assert config.output_dir == "from-env"
    assert config.city_api_url == "http://cities.test/random"


def test_unknown_config_key_rejected(tmp_path):
    path = _write(tmp_path, "generation.yaml", "num_entrys: 10\n")
    with pytest.raises(ConfigError, match="Unknown config fields"):
        load_config(path, env_file=tmp_path / "missing.env")


@pytest.mark.parametrize(
    "overrides",
    [
        {"num_entries": 0},
        {"min_age": 60, "max_age": 40},
        {"api_request_delay": -1.0},
        {"target_unique_cities": 0},
        {"request_timeout": 0},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ConfigError):
        GenerationConfig().with_overrides(**overrides).validate()


def test_none_overrides_are_ignored():
    config = GenerationConfig().with_overrides(num_entries=None, output_dir="x")
    assert config.num_entries == 5000
    assert config.output_dir == "x"


@pytest.mark.parametrize(
    "text",
    [
        "generation:\n  num_entries: lots\n",
        "generation:\n  api_request_delay: '0.5'\n",
        "generation:\n  export_dataset: 1\n",
        "generation:\n  num_cities_to_fetch: true\n",
        "generation:\n  - num_entries\n  - 10\n",
    ],
)
def test_mistyped_yaml_values_rejected(tmp_path, text):
    path = _write(tmp_path, "generation.yaml", text)
    with pytest.raises(ConfigError):
        load_config(path, env_file=tmp_path / "missing.env")


def test_integer_widens_to_float_field(tmp_path, monkeypatch):
    monkeypatch.delenv("PROMPT_DATA_CITY_API_URL", raising=False)
    monkeypatch.delenv("PROMPT_DATA_OUTPUT_DIR", raising=False)
    path = _write(tmp_path, "generation.yaml", "api_request_delay: 1\nrequest_timeout: 5\n")

    config = load_config(path, env_file=tmp_path / "missing.env")

    assert config.api_request_delay == 1.0
    assert isinstance(config.request_timeout, float)


def test_path_override_stored_as_string(tmp_path):
    config = GenerationConfig().with_overrides(output_dir=tmp_path / "out")
    assert config.output_dir == str(tmp_path / "out")
