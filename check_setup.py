#!/usr/bin/env python3
"""
Pre-flight checks for the float dashboard API.

Each check returns a list of (ok, detail) lines; the script exits non-zero
when any line fails.
"""

import os
import sys

from dotenv import load_dotenv

from setup_snowflake import count_view_rows, key_path, public_key_body

REQUIRED_VARS = ("SNOWFLAKE_ACCOUNT", "SNOWFLAKE_WAREHOUSE", "SNOWFLAKE_USER")


def environment():
    return [(bool(os.getenv(var)), var) for var in REQUIRED_VARS]


def private_key():
    path = key_path()
    if not path.exists():
        return [(False, f"{path} is missing (run setup_snowflake.py)")]
    try:
        body = public_key_body(path)
    except ValueError as e:
        return [(False, f"{path} is not an unencrypted PKCS#8 key: {e}")]
    return [(True, f"{path} (public key {body[:16]}...)")]


def view_mapping():
    from floatdash.registry import Registry

    registry = Registry()
    try:
        registry.load_views()
    except RuntimeError as e:
        return [(False, str(e))]
    return [(True, f"{name} -> {meta['view']}") for name, meta in registry.entities_cfg.items()]


def application():
    from floatdash.main import app

    paths = sorted({getattr(r, "path", "") for r in app.routes if getattr(r, "path", "").startswith("/api")})
    return [(True, p) for p in paths]


def warehouse():
    return [(True, f"{view}: {total} rows") for view, total in count_view_rows().items()]


CHECKS = [
    ("Environment", environment),
    ("Private key", private_key),
    ("View mapping", view_mapping),
    ("Application routes", application),
    ("Warehouse", warehouse),
]


def main():
    load_dotenv()
    print("=== Float Dashboard Pre-flight ===")

    failed = 0
    for title, check in CHECKS:
        print(f"\n{title}")
        try:
            lines = check()
        except Exception as e:
            lines = [(False, f"{type(e).__name__}: {e}")]
        for ok, detail in lines:
            print(f"   {'✅' if ok else '❌'} {detail}")
            failed += not ok

    if failed:
        print(f"\n❌ {failed} problem(s) found")
        sys.exit(1)
    print("\n🎉 Ready. Start the server with: uvicorn floatdash.main:app --reload")


if __name__ == "__main__":
    main()
