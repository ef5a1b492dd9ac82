from __future__ import annotations
from dotenv import load_dotenv

load_dotenv()

import os, logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .dependencies import REG
from .errors import ApiError
from .routes import profiles_router, charts_router, floats_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("floatdash")

app = FastAPI(title="ARGO Float Dashboard API", version="1.0.0")

app.include_router(profiles_router)
app.include_router(charts_router)
app.include_router(floats_router)

origins_raw = os.getenv("CORS_ALLOW_ORIGINS", "")
origins = [o.strip() for o in origins_raw.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def _api_error(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def _unhandled(request: Request, exc: Exception):
    log.exception("%s %s failed", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal error", "message": str(exc)})


@app.on_event("startup")
def _startup():
    REG.load_views()


@app.get("/healthz")
def health():
    return {
        "ok": True,
        "entities": list(REG.entities_cfg.keys()),
    }
