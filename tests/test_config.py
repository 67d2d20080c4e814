import pytest

from treeftp.config import (
    DEFAULT_OUTPUT_FILE,
    DEFAULT_PORT,
    MAX_NUM_RETRIES,
    RETRY_INTERVAL,
    ClientSettings,
    RetryPolicy,
)


def test_defaults_from_empty_environment():
    settings = ClientSettings.from_env({})

    assert settings.port == DEFAULT_PORT == 21
    assert settings.retry.max_retries == MAX_NUM_RETRIES == 3
    assert settings.retry.retry_interval == RETRY_INTERVAL == 5.0
    assert settings.output_file == DEFAULT_OUTPUT_FILE
    assert settings.log_level == "INFO"


def test_values_from_environment():
    settings = ClientSettings.from_env({
        "TREEFTP_PORT": "2121",
        "TREEFTP_TIMEOUT": "2.5",
        "TREEFTP_MAX_RETRIES": "5",
        "TREEFTP_RETRY_INTERVAL": "0",
        "TREEFTP_OUTPUT": "tree.json",
        "TREEFTP_LOG_LEVEL": "debug",
    })

    assert settings.port == 2121
    assert settings.timeout == 2.5
    assert settings.retry.max_retries == 5
    assert settings.retry.retry_interval == 0
    assert settings.output_file == "tree.json"
    assert settings.log_level == "DEBUG"


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("TREEFTP_PORT", "2100")

    assert ClientSettings.from_env().port == 2100


def test_blank_values_fall_back_to_defaults():
    assert ClientSettings.from_env({"TREEFTP_PORT": " "}).port == DEFAULT_PORT


@pytest.mark.parametrize("name, value", [
    ("TREEFTP_PORT", "ftp"),
    ("TREEFTP_MAX_RETRIES", "1.5"),
    ("TREEFTP_MAX_RETRIES", "0"),
    ("TREEFTP_RETRY_INTERVAL", "-1"),
    ("TREEFTP_LOG_LEVEL", "BASIC_FORMAT"),
    ("TREEFTP_LOG_LEVEL", "chatty"),
])
def test_invalid_values_raise(name, value):
    with pytest.raises(ValueError, match=name):
        ClientSettings.from_env({name: value})


def test_log_level_accepts_registered_names():
    assert ClientSettings.from_env({"TREEFTP_LOG_LEVEL": " warning "}).log_level == "WARNING"
    assert ClientSettings.from_env({"TREEFTP_LOG_LEVEL": ""}).log_level == "INFO"


def test_retry_policy_needs_one_attempt():
    with pytest.raises(ValueError, match="max_retries"):
        RetryPolicy(max_retries=0)
    assert RetryPolicy(max_retries=1, retry_interval=0).max_retries == 1
