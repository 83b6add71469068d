"""
Structured logging configuration
"""
import functools
import logging
import sys
from datetime import datetime

import structlog

from quizsmith.config import settings


def configure_logging(level: str = None):
    """Configure structured logging"""
    level = (level or settings.log_level).upper()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)
    logging.getLogger("redis").setLevel(logging.WARNING)


def get_logger(name: str = None):
    """Get a structured logger"""
    return structlog.get_logger(name)


def log_performance(func_name: str):
    """Decorator logging duration and result size of a pipeline stage"""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger("performance")
            start_time = datetime.now()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    "stage_failed",
                    stage=func_name,
                    duration_seconds=(datetime.now() - start_time).total_seconds(),
                    error=str(e),
                )
                raise
            logger.info(
                "stage_completed",
                stage=func_name,
                duration_seconds=(datetime.now() - start_time).total_seconds(),
                result_size=len(result) if hasattr(result, "__len__") else None,
            )
            return result
        return wrapper
    return decorator


def log_api_request(request, response=None, error=None):
    """Log API requests and responses"""
    logger = get_logger("api")

    log_data = {
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }

    if response is not None:
        logger.info(
            "api_request_completed",
            status_code=response.status_code,
            response_time=getattr(response, "response_time", None),
            **log_data,
        )
    elif error is not None:
        logger.error("api_request_failed", error=str(error),
                     status_code=getattr(error, "status_code", 500), **log_data)
    else:
        logger.info("api_request_started", **log_data)
