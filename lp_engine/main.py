from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lp_engine.api.routers.portfolio import router as portfolio_router
from lp_engine.api.routers.position_valuation import router as position_valuation_router
from lp_engine.api.routers.return_simulation import router as return_simulation_router
from lp_engine.api.routers.tick_conversion import router as tick_conversion_router
from lp_engine.shared.config import get_settings


logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="LP Valuation API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(position_valuation_router)
app.include_router(portfolio_router)
app.include_router(return_simulation_router)
app.include_router(tick_conversion_router)
