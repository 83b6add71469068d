"""
Health checks and monitoring with Prometheus metrics
"""
import random
import time

import psutil
import structlog
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest

from quizsmith.services.cache import cache
from quizsmith.services.quiz_generator import build_question_set
from quizsmith.services.session import sessions

logger = structlog.get_logger()

# Prometheus metrics
REQUEST_COUNT = Counter('http_requests_total', 'Total HTTP requests', ['method', 'endpoint', 'status'])
REQUEST_DURATION = Histogram('http_request_duration_seconds', 'HTTP request duration', ['method', 'endpoint'])
GENERATION_REQUESTS = Counter('quiz_generation_requests_total', 'Total quiz generation requests',
                              ['quiz_type', 'status'])
GENERATED_QUESTIONS = Counter('quiz_generated_questions_total', 'Total generated questions', ['kind'])
QUIZ_SUBMISSIONS = Counter('quiz_submissions_total', 'Total quiz submissions', ['mode'])
ACTIVE_SESSIONS = Gauge('quiz_active_sessions', 'Number of in-memory quiz sessions')

HEALTH_PROBE_TEXT = (
    "Photosynthesis is the process by which plants convert light into chemical energy. "
    "This process is critical for life on Earth."
)


class HealthChecker:
    def __init__(self):
        self.start_time = time.time()

    def check_cache(self) -> dict:
        """Check cache connectivity"""
        try:
            test_key = "health_check_test"
            cache.set(test_key, "test_value", expire=10)
            value = cache.get(test_key)
            cache.delete(test_key)

            if value == "test_value":
                return {
                    "status": "healthy",
                    "message": "Cache operations successful",
                    "backend": "redis" if cache.redis_client else "memory",
                }
            return {"status": "unhealthy", "message": "Cache operations failed"}
        except Exception as e:
            logger.error("cache_health_check_failed", error=str(e))
            return {"status": "unhealthy", "message": f"Cache connection failed: {str(e)}"}

    def check_generator(self) -> dict:
        """Run the pipeline on a fixed paragraph"""
        try:
            questions = build_question_set(HEALTH_PROBE_TEXT, 2, rng=random.Random(0))
            if questions:
                return {"status": "healthy", "message": f"Generated {len(questions)} probe questions"}
            return {"status": "unhealthy", "message": "Generator produced no questions"}
        except Exception as e:
            logger.error("generator_health_check_failed", error=str(e))
            return {"status": "unhealthy", "message": f"Generator failed: {str(e)}"}

    def get_system_metrics(self) -> dict:
        """Get system resource metrics"""
        try:
            memory = psutil.virtual_memory()
            disk = psutil.disk_usage('/')

            return {
                "cpu_percent": psutil.cpu_percent(interval=None),
                "memory_percent": memory.percent,
                "memory_available_gb": round(memory.available / (1024**3), 2),
                "disk_percent": disk.percent,
                "disk_free_gb": round(disk.free / (1024**3), 2),
                "uptime_seconds": time.time() - self.start_time
            }
        except Exception as e:
            logger.error("system_metrics_failed", error=str(e))
            return {"error": str(e)}

    def get_application_metrics(self) -> dict:
        ACTIVE_SESSIONS.set(len(sessions))
        return {
            "active_sessions": len(sessions),
            "cache_available": cache.redis_client is not None,
        }

    def get_health_status(self) -> dict:
        """Get overall health status"""
        checks = {
            "cache": self.check_cache(),
            "generator": self.check_generator(),
        }

        unhealthy_checks = [name for name, check in checks.items() if check["status"] == "unhealthy"]
        overall_status = "healthy" if not unhealthy_checks else "unhealthy"

        return {
            "status": overall_status,
            "timestamp": time.time(),
            "checks": checks,
            "system_metrics": self.get_system_metrics(),
            "application_metrics": self.get_application_metrics(),
            "unhealthy_components": unhealthy_checks
        }


# Global health checker instance
health_checker = HealthChecker()


def get_metrics():
    """Get Prometheus metrics"""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
