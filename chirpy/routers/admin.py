from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/metrics", response_class=HTMLResponse)
def metrics(request: Request):
    templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "metrics.html",
        {"hits": request.app.state.metrics.hits},
    )


@router.post("/reset", response_class=PlainTextResponse)
def reset(request: Request):
    request.app.state.metrics.reset()
    return "OK"
