"""REST API for the pylineup optimizer."""

from __future__ import annotations

import logging
import os
from typing import List

from fastapi import FastAPI, HTTPException, Query

from pylineup.api.schemas import BatchFailureResponse, OptimizeBatchResponse, OptimizeResponse
from pylineup.config import rules_from_env
from pylineup.models import TeamSnapshot
from pylineup.optimizer import optimize_lineup, optimize_teams


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="pylineup optimizer")
    app.state.rules = rules_from_env()

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/optimize", response_model=OptimizeResponse)
    async def optimize(
        team: TeamSnapshot,
        drops: bool = Query(True, description="Queue drop transactions for healthy inactive-list players"),
    ) -> OptimizeResponse:
        result = optimize_lineup(team, app.state.rules, generate_drops=drops)
        return OptimizeResponse.from_result(result)

    @app.post("/optimize/batch", response_model=OptimizeBatchResponse)
    async def optimize_batch(
        teams: List[TeamSnapshot],
        drops: bool = Query(True, description="Queue drop transactions for healthy inactive-list players"),
    ) -> OptimizeBatchResponse:
        if not teams:
            raise HTTPException(status_code=400, detail="at least one team is required")

        # requests are served in-process; the process pool is for the CLI
        outcomes = optimize_teams(teams, app.state.rules, generate_drops=drops, parallel_jobs=1)
        results = [OptimizeResponse.from_result(o.result) for o in outcomes if o.result is not None]
        failures = [
            BatchFailureResponse(team_key=o.team_key, error=o.error or "unknown error")
            for o in outcomes
            if o.result is None
        ]
        message = None
        if failures:
            message = f"{len(failures)} of {len(outcomes)} teams failed"
            logger.warning("Batch optimize: %s", message)
        return OptimizeBatchResponse(results=results, failures=failures, message=message)

    return app


def serve() -> None:
    """Run the API under uvicorn (``PYLINEUP_API_HOST`` / ``PYLINEUP_API_PORT``)."""

    import uvicorn

    host = os.getenv("PYLINEUP_API_HOST", "127.0.0.1")
    try:
        port = int(os.getenv("PYLINEUP_API_PORT", "8000"))
    except ValueError:
        logger.warning("Invalid int for PYLINEUP_API_PORT; using default 8000")
        port = 8000
    uvicorn.run(create_app(), host=host, port=port)
