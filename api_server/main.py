"""FastAPI application entry point"""

import os
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI

# Load environment variables
load_dotenv()

from api_server.dependencies import get_session_manager
from api_server.middleware import setup_cors, setup_rate_limit, setup_logging, LoggingMiddleware
from api_server.routes import health_router, debate_router, content_router, practice_router

# Setup logging
logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Stop timers and pending replies of sessions still live at shutdown
    if get_session_manager.cache_info().currsize:
        await get_session_manager().shutdown()


# Create FastAPI app
app = FastAPI(
    title="Debate Trainer API",
    description="Timed debate practice against an AI opponent, plus fallacy drills",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup middleware
setup_cors(app)
setup_rate_limit(app)
app.add_middleware(LoggingMiddleware)

# Include routers
app.include_router(health_router)
app.include_router(content_router)
app.include_router(debate_router)
app.include_router(practice_router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Debate Trainer API",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    uvicorn.run(
        "api_server.main:app",
        host=host,
        port=port,
        reload=True,
    )
