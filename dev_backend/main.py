"""
Dev stub for the Rollbar API.

Run with `uvicorn dev_backend.main:app --port 8010` and point the server at it
with ROLLBAR_API_BASE=http://127.0.0.1:8010/api/1. Answers in Rollbar's
{"err": ..., "result": ...} envelope with canned data.
"""
from __future__ import annotations

import os
import time
from typing import Any, Dict

from fastapi import FastAPI, Header
from fastapi.responses import JSONResponse

EXPECTED_TOKEN = os.getenv("ROLLBAR_ACCESS_TOKEN", "dev-token")
NOW = int(time.time())

ITEMS = [
    {
        "id": 1000 + n,
        "counter": n,
        "title": f"Example error #{n}",
        "level": "error",
        "status": "active",
        "environment": "production",
        "total_occurrences": 10 * n,
        "last_occurrence_timestamp": NOW - 60 * n,
    }
    for n in range(1, 6)
]

app = FastAPI(title="Dev stub backend for the Rollbar API")


def _ok(result: Any) -> Dict[str, Any]:
    return {"err": 0, "result": result}


def _unauthorized() -> JSONResponse:
    return JSONResponse({"err": 1, "message": "invalid access token"}, status_code=401)


@app.get("/api/1/items")
async def items(page: int = 1, x_rollbar_access_token: str = Header("")) -> Any:
    if x_rollbar_access_token != EXPECTED_TOKEN:
        return _unauthorized()
    return _ok({"items": ITEMS, "page": page, "total_count": len(ITEMS)})


@app.get("/api/1/item/{item_id}")
async def item(item_id: int, x_rollbar_access_token: str = Header("")) -> Any:
    if x_rollbar_access_token != EXPECTED_TOKEN:
        return _unauthorized()
    for record in ITEMS:
        if record["id"] == item_id:
            return _ok(record)
    return JSONResponse({"err": 1, "message": "Item not found"}, status_code=404)


@app.get("/api/1/deploys")
async def deploys(page: int = 1, x_rollbar_access_token: str = Header("")) -> Any:
    if x_rollbar_access_token != EXPECTED_TOKEN:
        return _unauthorized()
    return _ok({
        "page": page,
        "deploys": [
            {"id": 1, "environment": "production", "revision": "abc123", "status": "succeeded", "start_time": NOW - 3600, "finish_time": NOW - 3500},
        ],
    })


@app.get("/api/1/versions/{version}")
async def version(version: str, environment: str = "production", x_rollbar_access_token: str = Header("")) -> Any:
    if x_rollbar_access_token != EXPECTED_TOKEN:
        return _unauthorized()
    return _ok({
        "version": version,
        "environment": environment,
        "first_occurrence_timestamp": NOW - 7200,
        "last_occurrence_timestamp": NOW - 60,
        "item_stats": {"new": {"error": 2}, "repeated": {"error": 3}},
    })


@app.get("/api/1/reports/top_active_items")
async def top_active_items(x_rollbar_access_token: str = Header("")) -> Any:
    if x_rollbar_access_token != EXPECTED_TOKEN:
        return _unauthorized()
    return _ok([
        {"item": {**record, "occurrences": record["total_occurrences"]}, "counts": [1, 2, 3]}
        for record in ITEMS[:3]
    ])
