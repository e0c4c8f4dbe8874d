from __future__ import annotations

import logging

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from seo_audit.config import settings
from seo_audit.engine.analyzer import run_audit
from seo_audit.engine.report import audit_result_to_dict
from seo_audit.fetcher import validate_url

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class AuditRequest(BaseModel):
    url: str


app = FastAPI(title="SEO Audit API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.post("/audit")
async def audit_endpoint(request: AuditRequest) -> dict:
    try:
        url = validate_url(request.url)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        result = await run_audit(url)
    except httpx.HTTPError as exc:
        logger.error("audit of %s failed: %s", url, exc)
        raise HTTPException(status_code=500, detail="Failed to perform SEO audit") from exc
    return audit_result_to_dict(result)
