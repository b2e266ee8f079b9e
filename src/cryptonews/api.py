"""HTTP serving shell around the aggregation pipeline."""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from cryptonews.aggregator import collect_news
from cryptonews.config import Settings


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Settings to use. If None, they are read from the environment.

    Returns:
        Configured FastAPI app.
    """
    settings = settings or Settings.from_env()
    app = FastAPI(title="cryptonews")

    @app.get("/health")
    async def healthcheck():
        return {"status": "ok"}

    @app.get("/api/crypto-news")
    async def get_crypto_news():
        result = await collect_news(settings=settings)
        if not result.success:
            return JSONResponse(result.to_dict(), status_code=500)
        return JSONResponse(
            result.to_dict(),
            headers={"Cache-Control": settings.cache_control},
        )

    return app
