from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from marketscout.core.config import settings
from marketscout.core.logger import Logger
from marketscout.core.database import db
from marketscout.services.market_scanner import market_scanner
from marketscout.api import api_router

logger = Logger("Main")

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Starting Market Scout...")
    await db.connect()

    logger.info(
        f"Watch-list: {len(market_scanner.assets)} assets, "
        f"timeframes: {', '.join(market_scanner.timeframes)}"
    )
    await market_scanner.start_scheduler()

    yield

    # Shutdown
    logger.info("Shutting down...")
    await market_scanner.stop()
    await db.disconnect()

app = FastAPI(lifespan=lifespan, title="Market Scout API", version="1.0.0")

# CORS middleware for the dashboard
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.API_ENABLED:
    app.include_router(api_router)

@app.get("/health")
async def health_check():
    return {
        "status": "ok",
        "scan_state": market_scanner.state.value,
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("marketscout.main:app", host="0.0.0.0", port=settings.API_PORT)
