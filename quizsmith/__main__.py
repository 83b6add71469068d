import uvicorn

from quizsmith.config import settings


def main():
    """Serve the API with uvicorn"""
    uvicorn.run("quizsmith.main:app", host=settings.host, port=settings.port,
                log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
