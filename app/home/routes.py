from litestar import get


@get("/health", sync_to_thread=False)
def health() -> dict:
    """Liveness probe."""
    return {"status": "ok"}

routes = [health]
