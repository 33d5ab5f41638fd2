import uvicorn

from config.settings import get_settings


def main():
    """Run the SatBot relay with uvicorn"""
    settings = get_settings()

    # No write timeout below the 30s upstream budget; only idle connections are reaped
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        workers=1,
        timeout_keep_alive=60,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
