#!/usr/bin/env python3
"""
Writes the .env file the float dashboard API reads at startup.
Values already present in .env are offered as the defaults.
"""

from pathlib import Path

from dotenv import dotenv_values

ENV_PATH = Path(".env")

# (section, variable, prompt, default)
SETTINGS = [
    ("Snowflake", "SNOWFLAKE_ACCOUNT", "Account identifier", ""),
    ("Snowflake", "SNOWFLAKE_WAREHOUSE", "Warehouse", ""),
    ("Snowflake", "SNOWFLAKE_USER", "User", ""),
    ("Snowflake", "SNOWFLAKE_PRIVATE_KEY_PATH", "Private key file", "./snowflake_private_key.pem"),
    ("Snowflake", "SNOWFLAKE_DATABASE", "Database", "ARGO"),
    ("Snowflake", "SNOWFLAKE_SCHEMA", "Schema", "ARGO_FULL"),
    ("Snowflake", "SNOWFLAKE_DEFAULT_ROLE", "Role (blank for the user default)", ""),
    ("HTTP", "CORS_ALLOW_ORIGINS", "Allowed origins, comma separated", "http://localhost:3000"),
    ("Service", "VIEWS_FILE", "View mapping file", "config/views.yaml"),
    ("Service", "LOG_LEVEL", "Log level", "INFO"),
]


def render_env(values: dict) -> str:
    lines = []
    section = None
    for sec, var, _, default in SETTINGS:
        if sec != section:
            if lines:
                lines.append("")
            lines.append(f"# {sec}")
            section = sec
        lines.append(f"{var}={values.get(var, default)}")
    return "\n".join(lines) + "\n"


def prompt_values(current: dict) -> dict:
    values = {}
    section = None
    for sec, var, prompt, default in SETTINGS:
        if sec != section:
            print(f"\n[{sec}]")
            section = sec
        suggested = current.get(var) or default
        answer = input(f"   {prompt} [{suggested}]: ").strip()
        values[var] = answer or suggested
    values["LOG_LEVEL"] = values["LOG_LEVEL"].upper()
    return values


def main():
    print("=== Float Dashboard Environment Setup ===")
    current = dotenv_values(ENV_PATH) if ENV_PATH.exists() else {}
    if current:
        print(f"Existing values from {ENV_PATH} are shown as defaults.")

    values = prompt_values(current)
    missing = [var for var in ("SNOWFLAKE_ACCOUNT", "SNOWFLAKE_WAREHOUSE", "SNOWFLAKE_USER") if not values[var]]

    ENV_PATH.write_text(render_env(values), encoding="utf-8")
    print(f"\n✅ Wrote {ENV_PATH.absolute()}")
    if missing:
        print(f"⚠️  Still empty: {', '.join(missing)}")
    print("   Next: python setup_snowflake.py, then python check_setup.py")


if __name__ == "__main__":
    main()
