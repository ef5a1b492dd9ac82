import os, logging, typing as t

log = logging.getLogger("warehouse")

def _load_p8_as_der_bytes(path: str) -> bytes:
    from cryptography.hazmat.primitives import serialization

    with open(path, "rb") as f:
        raw = f.read()
    is_pem = raw.lstrip().startswith(b"-----BEGIN")
    if is_pem:
        key = serialization.load_pem_private_key(raw, password=None)
    else:
        key = serialization.load_der_private_key(raw, password=None)

    # Snowflake needs unencrypted PKCS#8 DER bytes
    return key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )

def _sf_connect_for(db: str, schema: str, *, role: str | None = None):
    import snowflake.connector

    # The query builder renders positional '?' placeholders.
    snowflake.connector.paramstyle = "qmark"

    common = dict(
        account=os.environ["SNOWFLAKE_ACCOUNT"],
        warehouse=os.environ["SNOWFLAKE_WAREHOUSE"],
        database=db,
        schema=schema,
        client_session_keep_alive=True,
        session_parameters={
            "QUERY_TAG": "api:floatdash",
        },
    )
    if role:
        common["role"] = role

    pk_path = os.environ["SNOWFLAKE_PRIVATE_KEY_PATH"]
    pkb = _load_p8_as_der_bytes(pk_path)
    conn = snowflake.connector.connect(
        user=os.environ["SNOWFLAKE_USER"],
        private_key=pkb,
        **common
    )

    return conn

def _split_db_path(path: str) -> tuple[str, str, str]:
    """Accept 1-, 2-, or 3-part names; fill missing parts from env."""
    parts = [p.strip().strip('"') for p in path.split(".") if p.strip() != ""]
    if len(parts) == 3:
        return parts[0], parts[1], parts[2]
    if len(parts) == 2:
        db = os.environ.get("SNOWFLAKE_DATABASE")
        if not db:
            raise RuntimeError("SCHEMA.VIEW given but SNOWFLAKE_DATABASE not set.")
        return db, parts[0], parts[1]
    if len(parts) == 1:
        db = os.environ.get("SNOWFLAKE_DATABASE")
        schema = os.environ.get("SNOWFLAKE_SCHEMA")
        if not db or not schema:
            raise RuntimeError("VIEW given but SNOWFLAKE_DATABASE or SNOWFLAKE_SCHEMA missing.")
        return db, schema, parts[0]
    raise RuntimeError(f"Invalid object name: {path!r}")


class SnowflakeWarehouse:
    """
    Runs parameterized queries against Snowflake. One connection per call;
    rows come back as dicts keyed by lower-cased column name.
    """

    def __init__(self, db_path: str, *, role: str | None = None):
        self.db, self.schema, _ = _split_db_path(db_path)
        self.role = role

    def execute(self, sql: str, params: t.Any = None) -> list[dict[str, t.Any]]:
        from snowflake.connector import DictCursor

        log.debug("Executing query: %s", sql[:200])
        conn = _sf_connect_for(self.db, self.schema, role=self.role)
        try:
            with conn.cursor(DictCursor) as cur:
                cur.execute(sql, params or None)
                rows = cur.fetchall() if cur.description else []
            return [{k.lower(): v for k, v in r.items()} for r in rows]
        finally:
            conn.close()
