#!/usr/bin/env python3
"""
Key-pair setup for the float dashboard's Snowflake user.

Creates the private key at SNOWFLAKE_PRIVATE_KEY_PATH when it is missing,
prints the ALTER USER statement that registers its public half, and counts
rows in the configured views once the key is accepted.
"""

import base64
import os
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from dotenv import load_dotenv

from floatdash.database.snowflake import _load_p8_as_der_bytes

DEFAULT_KEY_PATH = "./snowflake_private_key.pem"


def key_path() -> Path:
    return Path(os.getenv("SNOWFLAKE_PRIVATE_KEY_PATH") or DEFAULT_KEY_PATH)


def write_private_key(path: Path) -> None:
    """Unencrypted PKCS#8 PEM, readable by the owner only."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ))
    path.chmod(0o600)


def public_key_body(path: Path) -> str:
    """Base64 SubjectPublicKeyInfo, the form RSA_PUBLIC_KEY expects."""
    der = _load_p8_as_der_bytes(str(path))
    private_key = serialization.load_der_private_key(der, password=None)
    spki = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return base64.b64encode(spki).decode("ascii")


def alter_user_statement(user: str, body: str) -> str:
    return f"ALTER USER {user or '<your_user>'} SET RSA_PUBLIC_KEY='{body}';"


def count_view_rows() -> dict:
    from floatdash.database import SnowflakeWarehouse
    from floatdash.registry import Registry

    registry = Registry()
    registry.load_views()
    counts = {}
    for name in ("profiles", "measurements"):
        view = registry.view(name)
        warehouse = SnowflakeWarehouse(view, role=os.getenv("SNOWFLAKE_DEFAULT_ROLE"))
        counts[view] = warehouse.execute(f"SELECT COUNT(*) AS total FROM {view}")[0]["total"]
    return counts


def main():
    load_dotenv()
    path = key_path()
    print("=== Snowflake Key-Pair Setup ===\n")

    if path.exists():
        print(f"🔍 Using existing private key: {path.absolute()}")
    else:
        write_private_key(path)
        print(f"🔑 Wrote new private key: {path.absolute()}")

    print("\n📝 Run this in Snowflake as a user administrator:")
    print(f"   {alter_user_statement(os.getenv('SNOWFLAKE_USER', ''), public_key_body(path))}")
    input("\n   Press Enter once the public key is registered...")

    print("\n🧪 Counting rows in the configured views...")
    try:
        counts = count_view_rows()
    except Exception as e:
        print(f"❌ Connection failed: {e}")
        print("   Check the SNOWFLAKE_* values in .env and the grants on the ARGO views.")
        return
    for view, total in counts.items():
        print(f"✅ {view}: {total} rows")


if __name__ == "__main__":
    main()
