import pytest

from reelcheck.config import ConfigError, ConfigReader, env_key


@pytest.fixture
def properties(tmp_path):
    path = tmp_path / "config.properties"
    path.write_text(
        "# browser settings\n"
        "browser=chromium\n"
        "headless = true\n"
        "baseUrl=https://www.themoviedb.org\n"
        "saveTrace=maybe\n"
        "api.baseUrl=https://gorest.co.in\n"
        "api.token=\n"
    )
    return path


@pytest.fixture
def reader(properties, monkeypatch):
    for key in ("browser", "headless", "baseUrl", "saveTrace", "api.baseUrl", "api.token"):
        monkeypatch.delenv(env_key(key), raising=False)
    return ConfigReader(properties)


def test_env_key():
    assert env_key("api.token") == "REELCHECK_API_TOKEN"
    assert env_key("baseUrl") == "REELCHECK_BASEURL"
    assert env_key("trace-dir") == "REELCHECK_TRACE_DIR"


class TestConfigReader:
    def test_reads_file(self, reader):
        assert reader.get("browser") == "chromium"
        assert reader.get("api.baseUrl") == "https://gorest.co.in"

    def test_value_is_trimmed(self, reader):
        assert reader.get("headless") == "true"

    def test_empty_value_is_present(self, reader):
        assert reader.get("api.token") == ""

    def test_missing_key(self, reader):
        with pytest.raises(ConfigError, match="traceDir"):
            reader.get("traceDir")

    def test_get_or_default(self, reader):
        assert reader.get_or_default("traceDir", "traces") == "traces"
        assert reader.get_or_default("browser", "webkit") == "chromium"

    def test_environment_override(self, reader, monkeypatch):
        monkeypatch.setenv("REELCHECK_BROWSER", " firefox ")
        assert reader.get("browser") == "firefox"
        assert reader.as_dict()["browser"] == "firefox"

    def test_missing_file_uses_environment(self, tmp_path, monkeypatch, caplog):
        monkeypatch.setenv("REELCHECK_BASEURL", "https://example.test")
        missing = ConfigReader(tmp_path / "nope.properties")

        with caplog.at_level("WARNING", logger="reelcheck.config"):
            assert missing.get("baseUrl") == "https://example.test"

        assert missing.as_dict() == {}
        assert "not found" in caplog.text

    def test_path_from_environment(self, properties, monkeypatch):
        monkeypatch.setenv("REELCHECK_CONFIG", str(properties))
        assert ConfigReader().path == properties

    def test_reload(self, reader, properties):
        assert reader.get("browser") == "chromium"
        properties.write_text("browser=webkit\n")
        assert reader.get("browser") == "chromium"

        reader.reload()
        assert reader.get("browser") == "webkit"


class TestGetBool:
    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("TRUE", True), ("1", True), ("yes", True), ("on", True),
        ("false", False), ("False", False), ("0", False), ("no", False), ("off", False),
    ])
    def test_accepted_values(self, reader, monkeypatch, raw, expected):
        monkeypatch.setenv("REELCHECK_HEADLESS", raw)
        assert reader.get_bool("headless") is expected

    def test_malformed(self, reader):
        with pytest.raises(ConfigError, match="not a boolean"):
            reader.get_bool("saveTrace")

    def test_missing_without_default(self, reader):
        with pytest.raises(ConfigError):
            reader.get_bool("recordVideo")

    def test_missing_with_default(self, reader):
        assert reader.get_bool("recordVideo", default=False) is False
