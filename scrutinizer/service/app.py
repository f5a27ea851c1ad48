"""FastAPI application entrypoint for scrutinizer service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import DEFAULT_REFERENCE
from ..errors import (
    BackendIOError,
    BackendUnavailableError,
    CloneError,
    ReferenceNotFoundError,
)
from ..orchestrator import Examiner


class ExamineRequest(BaseModel):
    target: str
    reference: str = DEFAULT_REFERENCE
    plugins: List[str] = Field(default_factory=list)


class ExamineResponse(BaseModel):
    target: str
    reference: str
    result: Dict[str, Any]


class HealthResponse(BaseModel):
    status: str


def create_app(
    examiner_factory: Callable[[], Examiner] = Examiner,
) -> FastAPI:
    """Create the FastAPI application exposing scrutinizer examinations."""

    app = FastAPI(title="Scrutinizer Service", version="2.4.0")

    async def get_examiner() -> Examiner:
        # A fresh examiner per request keeps runs independent.
        return examiner_factory()

    async def _in_executor(func: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/examine/local", response_model=ExamineResponse)
    async def examine_local(
        payload: ExamineRequest,
        examiner: Examiner = Depends(get_examiner),
    ) -> ExamineResponse:
        def _run() -> Dict[str, Any]:
            return examiner.local(
                payload.target, reference=payload.reference, plugins=payload.plugins
            )

        result = await _in_executor(_run)
        return ExamineResponse(target=payload.target, reference=payload.reference, result=result)

    @app.post("/examine/remote", response_model=ExamineResponse)
    async def examine_remote(
        payload: ExamineRequest,
        examiner: Examiner = Depends(get_examiner),
    ) -> ExamineResponse:
        def _run() -> Dict[str, Any]:
            return examiner.remote(
                payload.target, reference=payload.reference, plugins=payload.plugins
            )

        result = await _in_executor(_run)
        return ExamineResponse(target=payload.target, reference=payload.reference, result=result)

    @app.exception_handler(ReferenceNotFoundError)
    @app.exception_handler(BackendUnavailableError)
    async def not_found_handler(_: Any, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(CloneError)
    async def clone_error_handler(_: Any, exc: CloneError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(BackendIOError)
    async def backend_io_handler(_: Any, exc: BackendIOError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000, *, examiner_factory: Optional[Callable[[], Examiner]] = None
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(examiner_factory or Examiner)
    uvicorn.run(app, host=host, port=port)
