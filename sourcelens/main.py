import uvicorn

from sourcelens.api.app import create_app
from sourcelens.config.settings import Settings
from sourcelens.logging.logger import Log


def main() -> None:
    """Entry point: load settings -> configure logging -> build app -> serve."""
    settings = Settings()
    Log.configure(settings.log_level)
    Log.info(f"Starting SourceLens ingestion API ({settings.app_env}) on {settings.host}:{settings.port}")
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
