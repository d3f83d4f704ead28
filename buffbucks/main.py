"""
BuffBucks oracle service.
Stateless HTTP entrypoint for mint evaluations requested on-chain.
"""

import time

from fastapi import FastAPI, Request

from buffbucks.config import settings
from buffbucks.infrastructure.observability.logging import get_logger, log_request, setup_logging
from buffbucks.routes import functions, health

# Setup logging before creating the app
setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)

app = FastAPI(
    title="BuffBucks Oracle",
    description="Mints activity tokens from daily Google Fit data",
    version="0.1.0",
)

# Include routers
app.include_router(health.router)
app.include_router(functions.router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log HTTP requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(process_time, 2),
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
