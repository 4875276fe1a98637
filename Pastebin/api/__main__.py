import uvicorn

from Pastebin.core.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "Pastebin.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        # The socket-peer fallback for the client IP honours X-Forwarded-For.
        proxy_headers=True,
    )


if __name__ == "__main__":
    main()
