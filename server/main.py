from __future__ import annotations

import logging
import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List

from jankenbrain import JankenBrain, JankenBrainError, parse_records
from jankenbrain.config import Settings


settings = Settings()
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO), format="[%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger("jankenbrain.server")

app = FastAPI(title="JankenBrain API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

brain = JankenBrain(options=settings.default_options(), random_seed=settings.random_seed)


class HistoryReq(BaseModel):
    history: List[Dict[str, Any]] = Field(default_factory=list)
    options: Optional[Dict[str, Any]] = None


class StatisticsReq(BaseModel):
    history: List[Dict[str, Any]] = Field(default_factory=list)


class DistributionRes(BaseModel):
    distribution: Dict[str, float]
    estimator: str
    explored: bool


class RecommendRes(BaseModel):
    hand: str
    rationale: Dict[str, Any]


@app.exception_handler(JankenBrainError)
async def janken_error_handler(request: Request, exc: JankenBrainError):
    logger.info("rejected %s: %s", request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/options/default")
def default_options():
    return brain.options.to_dict()


@app.post("/distribution", response_model=DistributionRes)
def distribution(req: HistoryReq):
    history = parse_records(req.history, now_ms=brain.clock())
    dist, meta = brain.predict(history, req.options)
    return DistributionRes(distribution=dist.to_dict(), estimator=meta["estimator"], explored=meta["explored"])


@app.post("/recommend", response_model=RecommendRes)
def recommend(req: HistoryReq):
    history = parse_records(req.history, now_ms=brain.clock())
    rec = brain.recommend(history, req.options)
    return RecommendRes(**rec.to_dict())


@app.post("/statistics")
def statistics(req: StatisticsReq):
    history = parse_records(req.history, now_ms=brain.clock())
    return brain.statistics(history).to_dict()


# Mount static files last so the API routes above take precedence
if os.path.exists(settings.static_path):
    app.mount("/", StaticFiles(directory=settings.static_path, html=True), name="static")
