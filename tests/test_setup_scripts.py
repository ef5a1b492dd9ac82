import base64
import stat

from cryptography.hazmat.primitives import serialization

import check_setup
import setup_env
import setup_snowflake


def test_key_path_follows_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("SNOWFLAKE_PRIVATE_KEY_PATH", str(tmp_path / "keys" / "sf.pem"))
    assert setup_snowflake.key_path() == tmp_path / "keys" / "sf.pem"
    monkeypatch.delenv("SNOWFLAKE_PRIVATE_KEY_PATH")
    assert str(setup_snowflake.key_path()) == "snowflake_private_key.pem"


def test_public_key_matches_written_private_key(tmp_path):
    path = tmp_path / "keys" / "sf.pem"
    setup_snowflake.write_private_key(path)
    assert stat.S_IMODE(path.stat().st_mode) == 0o600

    body = setup_snowflake.public_key_body(path)
    public = serialization.load_der_public_key(base64.b64decode(body))
    private = serialization.load_pem_private_key(path.read_bytes(), password=None)
    assert public.public_numbers() == private.public_key().public_numbers()


def test_alter_user_statement():
    assert setup_snowflake.alter_user_statement("ARGO_API", "MIIB") == (
        "ALTER USER ARGO_API SET RSA_PUBLIC_KEY='MIIB';"
    )
    assert "<your_user>" in setup_snowflake.alter_user_statement("", "MIIB")


def test_render_env_groups_sections_and_fills_defaults():
    text = setup_env.render_env({"SNOWFLAKE_ACCOUNT": "xy12345", "LOG_LEVEL": "DEBUG"})
    lines = text.splitlines()
    assert lines[0] == "# Snowflake"
    assert "SNOWFLAKE_ACCOUNT=xy12345" in lines
    assert "SNOWFLAKE_SCHEMA=ARGO_FULL" in lines
    assert "VIEWS_FILE=config/views.yaml" in lines
    assert lines[-1] == "LOG_LEVEL=DEBUG"
    assert text.count("# ") == 3


def test_prompt_values_prefers_existing_settings(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt: "")
    values = setup_env.prompt_values({"SNOWFLAKE_USER": "ARGO_API", "LOG_LEVEL": "debug"})
    assert values["SNOWFLAKE_USER"] == "ARGO_API"
    assert values["SNOWFLAKE_DATABASE"] == "ARGO"
    assert values["LOG_LEVEL"] == "DEBUG"


def test_private_key_check(monkeypatch, tmp_path):
    path = tmp_path / "sf.pem"
    monkeypatch.setenv("SNOWFLAKE_PRIVATE_KEY_PATH", str(path))
    [(ok, detail)] = check_setup.private_key()
    assert not ok and "missing" in detail

    path.write_text("not a key")
    [(ok, detail)] = check_setup.private_key()
    assert not ok

    setup_snowflake.write_private_key(path)
    [(ok, detail)] = check_setup.private_key()
    assert ok


def test_environment_check_lists_each_variable(monkeypatch):
    monkeypatch.setenv("SNOWFLAKE_ACCOUNT", "xy12345")
    monkeypatch.delenv("SNOWFLAKE_WAREHOUSE", raising=False)
    monkeypatch.setenv("SNOWFLAKE_USER", "ARGO_API")
    assert check_setup.environment() == [
        (True, "SNOWFLAKE_ACCOUNT"),
        (False, "SNOWFLAKE_WAREHOUSE"),
        (True, "SNOWFLAKE_USER"),
    ]
