from __future__ import annotations

from datetime import timedelta

import pytest

from gallery.core.config import (
    DEFAULT_ACCESS_SECRET,
    DEFAULT_REFRESH_SECRET,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_seconds,
    get_config,
    validate_config,
)


def _config(**overrides):
    base = {
        "ACCESS_TOKEN_SECRET": "a-secret",
        "REFRESH_TOKEN_SECRET": "r-secret",
        "STORAGE_BACKEND": "gcs",
        "FILES_BUCKET_NAME": "bucket",
        "DEBUG": False,
        "TESTING": False,
    }
    base.update(overrides)
    return base


def test_valid_config_passes():
    validate_config(_config())


@pytest.mark.parametrize("key", ["ACCESS_TOKEN_SECRET", "REFRESH_TOKEN_SECRET"])
def test_missing_secret(key):
    with pytest.raises(RuntimeError, match="required"):
        validate_config(_config(**{key: ""}))


def test_secrets_must_differ():
    with pytest.raises(RuntimeError, match="must be different"):
        validate_config(_config(ACCESS_TOKEN_SECRET="same", REFRESH_TOKEN_SECRET="same"))


def test_placeholder_secrets_rejected_in_production():
    with pytest.raises(RuntimeError, match="overridden"):
        validate_config(
            _config(
                ACCESS_TOKEN_SECRET=DEFAULT_ACCESS_SECRET,
                REFRESH_TOKEN_SECRET=DEFAULT_REFRESH_SECRET,
            )
        )


def test_placeholder_secrets_allowed_in_debug():
    validate_config(
        _config(
            ACCESS_TOKEN_SECRET=DEFAULT_ACCESS_SECRET,
            REFRESH_TOKEN_SECRET=DEFAULT_REFRESH_SECRET,
            DEBUG=True,
        )
    )


def test_gcs_requires_bucket():
    with pytest.raises(RuntimeError, match="FILES_BUCKET_NAME"):
        validate_config(_config(FILES_BUCKET_NAME=""))


def test_memory_backend_needs_no_bucket():
    validate_config(_config(STORAGE_BACKEND="memory", FILES_BUCKET_NAME=""))


def test_unknown_backend():
    with pytest.raises(RuntimeError, match="Unknown STORAGE_BACKEND"):
        validate_config(_config(STORAGE_BACKEND="s3"))


@pytest.mark.parametrize(
    ("env", "expected"),
    [("production", ProductionConfig), ("testing", TestingConfig), ("whatever", DevelopmentConfig)],
)
def test_get_config(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)
    assert get_config() is expected


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("yes", True), ("off", False)])
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("SOME_FLAG", raw)
    assert env_bool("SOME_FLAG") is expected


def test_env_seconds(monkeypatch):
    monkeypatch.setenv("SOME_TTL", "90")
    assert env_seconds("SOME_TTL", 10) == timedelta(seconds=90)
    monkeypatch.delenv("SOME_TTL")
    assert env_seconds("SOME_TTL", 10) == timedelta(seconds=10)


def test_env_seconds_rejects_non_positive(monkeypatch):
    monkeypatch.setenv("SOME_TTL", "0")
    with pytest.raises(ValueError):
        env_seconds("SOME_TTL", 10)


def test_testing_config_uses_distinct_secrets():
    validate_config({k: getattr(TestingConfig, k) for k in dir(TestingConfig) if k.isupper()})
