"""FastAPI application entrypoint for ampscript service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..components import DEFAULT_PLACEHOLDER
from ..config import load_config
from ..models import DetectionMode, InsertionMode
from ..pipeline import ImportOptions, ScriptImporter
from ..versions import UnresolvedComponentError


class InjectRequest(BaseModel):
    html: str
    mode: InsertionMode = InsertionMode.PLACEHOLDER
    placeholder: str = DEFAULT_PLACEHOLDER
    detection: DetectionMode = DetectionMode.SCANNER
    overrides: Dict[str, str] = {}
    force_latest: bool = False


class InjectResponse(BaseModel):
    html: str
    changed: bool


class HealthResponse(BaseModel):
    status: str


def _default_importer() -> ScriptImporter:
    return ScriptImporter.from_config(load_config(Path.cwd()))


def create_app(
    importer_factory: Callable[[], ScriptImporter] = _default_importer,
) -> FastAPI:
    """Create the FastAPI application exposing script injection."""

    app = FastAPI(title="AMP Script Service", version="1.0.0")

    async def get_importer() -> ScriptImporter:
        return importer_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/inject", response_model=InjectResponse)
    async def inject(
        payload: InjectRequest,
        importer: ScriptImporter = Depends(get_importer),
    ) -> InjectResponse:
        options = ImportOptions(
            placeholder=payload.placeholder,
            mode=payload.mode,
            detection=payload.detection,
            overrides=payload.overrides,
            force_latest=payload.force_latest,
        )

        def _run() -> str:
            return importer.add_scripts(payload.html, options)

        # Validator mode shells out, so keep the event loop free.
        loop = asyncio.get_running_loop()
        html = await loop.run_in_executor(None, _run)
        return InjectResponse(html=html, changed=html != payload.html)

    @app.exception_handler(UnresolvedComponentError)
    async def unresolved_component_handler(
        _: Any, exc: UnresolvedComponentError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "component": exc.component},
        )

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1",
    port: int = 8000,
    importer_factory: Optional[Callable[[], ScriptImporter]] = None,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(importer_factory or _default_importer)
    uvicorn.run(app, host=host, port=port)
