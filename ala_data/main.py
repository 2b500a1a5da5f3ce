from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ala_data.api.routers import analytics, health, pool_data, recent_swaps, yields
from ala_data.shared.config import get_settings


logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="Uniswap v3 Pool Data API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(pool_data.router)
app.include_router(recent_swaps.router)
app.include_router(analytics.router)
app.include_router(yields.router)
