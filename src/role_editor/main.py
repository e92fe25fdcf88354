# configure logging early so library messages emitted during import use the JSON renderer
from .logging_config import get_logger

logger = get_logger(__name__)

from .deps.providers import get_role_store, get_settings
from .wiring import create_app

app = create_app(get_settings())


@app.on_event("startup")
async def on_startup():
    # build the role store eagerly so a bad catalog file fails the boot, not the first request
    store = get_role_store()
    logger.info("startup complete", extra={"permission_count": len(store.permissions)})


@app.on_event("shutdown")
async def on_shutdown():
    logger.info("shutdown complete")


if __name__ == "__main__":
    import uvicorn

    s = get_settings()
    uvicorn.run("role_editor.main:app", host=s.server_host, port=s.server_port, reload=True)
