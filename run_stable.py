"""
Start the read-only statistics API without auto-reload.

Install the package first (``pip install -e .``).
"""
import uvicorn
from synthstats.config import settings


def main():
    print(f"Starting {settings.PROJECT_NAME} {settings.VERSION}")
    print(f"Stats: http://localhost:8000{settings.API_V1_PREFIX}/stats")
    print(f"Health: http://localhost:8000{settings.API_V1_PREFIX}/health")
    print("-" * 50)

    uvicorn.run(
        "synthstats.main:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()
