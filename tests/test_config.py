"""Unit tests for configuration, input validation and output writing."""

import json

import pytest

from appstore_scraper.config import ClientConfig, ConfigError, load_config
from appstore_scraper.errors import AppStoreError, PreconditionError
from appstore_scraper.schema import App, Ratings, Suggestion
from appstore_scraper.utils.http_client import RequestOptions
from appstore_scraper.utils.output_writer import to_jsonable, write_output
from appstore_scraper.validate import (
    validate_category,
    validate_country,
    validate_required_field,
    validate_search_pagination,
)


class TestClientConfig:
    def test_defaults(self):
        cfg = ClientConfig.from_raw({}, env={})
        assert cfg.country == "us"
        assert cfg.lang is None
        assert cfg.timeout == 15.0
        assert cfg.retries == 0
        assert cfg.output_dir == "output"

    def test_reads_global_section(self):
        cfg = ClientConfig.from_raw(
            {"country": "GB", "lang": "en-gb", "timeout": 5, "retries": 2, "headers": {"X-Test": 1}},
            env={},
        )
        assert cfg.country == "gb"
        assert cfg.timeout == 5.0
        assert cfg.retries == 2
        assert cfg.headers == {"X-Test": "1"}

    def test_env_overrides_file(self):
        env = {"APPSTORE_COUNTRY": "de", "APPSTORE_TIMEOUT": "2.5", "APPSTORE_RETRIES": "3"}
        cfg = ClientConfig.from_raw({"country": "gb", "timeout": 30}, env=env)
        assert cfg.country == "de"
        assert cfg.timeout == 2.5
        assert cfg.retries == 3

    @pytest.mark.parametrize(
        "raw",
        [{"country": "zz"}, {"timeout": "soon"}, {"timeout": 0}, {"retries": -1}, {"headers": ["a"]}],
    )
    def test_invalid_values(self, raw):
        with pytest.raises(ConfigError):
            ClientConfig.from_raw(raw, env={})

    def test_request_options(self):
        cfg = ClientConfig(timeout=3.0, retries=1, headers={"X-A": "b"})
        assert cfg.request_options() == RequestOptions(headers={"X-A": "b"}, timeout=3.0, retries=1)


class TestLoadConfig:
    def test_missing_file_is_empty(self, tmp_path):
        assert load_config(tmp_path / "nope.yaml") == {}

    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("global:\n  country: fr\n  retries: 2\n", encoding="utf-8")
        assert load_config(path) == {"global": {"country": "fr", "retries": 2}}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == {}

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)


class TestValidate:
    def test_country_case_insensitive(self):
        validate_country("US")

    def test_unknown_country(self):
        with pytest.raises(PreconditionError, match='Invalid country: "xx"'):
            validate_country("xx")

    def test_category_rejects_bool(self):
        with pytest.raises(PreconditionError):
            validate_category(True)

    def test_pagination_messages(self):
        with pytest.raises(PreconditionError, match="num must be a positive integer"):
            validate_search_pagination(0, 1)
        with pytest.raises(PreconditionError, match="page must be a positive integer"):
            validate_search_pagination(1, 0)

    def test_required_field(self):
        validate_required_field({"id": 0, "app_id": None}, ["id", "app_id"], "missing")
        with pytest.raises(PreconditionError, match="missing"):
            validate_required_field({"id": None}, ["id", "app_id"], "missing")

    def test_precondition_is_value_error(self):
        assert issubclass(PreconditionError, ValueError)
        assert issubclass(PreconditionError, AppStoreError)


class TestOutputWriter:
    def test_to_jsonable_handles_models_and_lists(self):
        data = to_jsonable([Suggestion(term="a"), Suggestion(term="b")])
        assert data == [{"term": "a"}, {"term": "b"}]
        assert to_jsonable([1, 2]) == [1, 2]

    def test_histogram_keys_serialized(self):
        data = to_jsonable(Ratings(ratings=1, histogram={1: 0, 2: 0, 3: 0, 4: 0, 5: 1}))
        assert json.loads(json.dumps(data))["histogram"]["5"] == 1

    def test_writes_file(self, tmp_path):
        dest = write_output(App(id=1, title="Ünïcode"), tmp_path / "nested" / "app.json")
        assert dest.exists()
        data = json.loads(dest.read_text(encoding="utf-8"))
        assert data["id"] == 1
        assert data["title"] == "Ünïcode"
