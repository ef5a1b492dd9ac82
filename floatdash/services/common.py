import asyncio, logging, time, typing as t

from fastapi.concurrency import run_in_threadpool

from ..database import Warehouse
from ..errors import UpstreamQueryFailure
from ..query import Query

log = logging.getLogger("warehouse")


def utc_now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


async def run_query(warehouse: Warehouse, query: Query) -> list[dict[str, t.Any]]:
    """Execute one query off the event loop; any warehouse error becomes UpstreamQueryFailure."""
    try:
        return await run_in_threadpool(warehouse.execute, query.sql, query.params)
    except Exception as e:
        log.exception("Warehouse query failed: %s", query.sql[:200])
        raise UpstreamQueryFailure(str(e)) from e


async def run_all(warehouse: Warehouse, *queries: Query) -> list[list[dict[str, t.Any]]]:
    """
    Run queries concurrently and join. The first failure fails the whole
    batch; no partial results are returned.
    """
    return list(await asyncio.gather(*(run_query(warehouse, q) for q in queries)))
