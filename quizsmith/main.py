import time

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from quizsmith.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from quizsmith.routers import quiz as quiz_router
from quizsmith.services.logging import configure_logging, log_api_request
from quizsmith.services.monitoring import REQUEST_COUNT, REQUEST_DURATION, get_metrics, health_checker
from quizsmith.services.session import sessions

# Configure logging
configure_logging()
logger = structlog.get_logger()

app = FastAPI(
    title="QuizSmith",
    description="Turns plain-text documents into scorable quizzes",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


# Add middleware for request logging and metrics
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    log_api_request(request)

    try:
        response = await call_next(request)
    except Exception as e:
        log_api_request(request, error=e)
        raise

    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    route = request.scope.get("route")
    endpoint = getattr(route, "path", request.url.path)
    REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=response.status_code).inc()
    REQUEST_DURATION.labels(method=request.method, endpoint=endpoint).observe(process_time)

    response.response_time = process_time
    log_api_request(request, response)
    return response


# ----------------- Health & Monitoring Endpoints -----------------
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return health_checker.get_health_status()


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint"""
    return get_metrics()


# ----------------- Shutdown -----------------
@app.on_event("shutdown")
def on_shutdown():
    sessions.clear()
    logger.info("quiz_sessions_cleared")


# ----------------- Routers -----------------
app.include_router(quiz_router.router)
