from contextlib import asynccontextmanager
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth import router as auth_router
from bids import repository as bids_repository
from bids import router as bids_router
from cars import repository as cars_repository
from cars import router as cars_router
from core import config, db
from core.documents import DocumentCollection
from core.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # One store handle per process, shared by every request.
    database = db.Database(db.database_url())
    await database.connect()
    for name in (cars_repository.COLLECTION, bids_repository.COLLECTION):
        await DocumentCollection(database, name).ensure_table()
    app.state.database = database
    logger.info("Database connected")
    try:
        yield
    finally:
        app.state.database = None
        await database.close()


async def handle_database_error(request: Request, exc: db.DatabaseError) -> JSONResponse:
    logger.exception("Datastore failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error."})


def create_application() -> FastAPI:
    app = FastAPI(title="AutoBid API", lifespan=lifespan)
    app.state.database = None

    # Browser clients send the session cookie, so credentials must be allowed.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(db.DatabaseError, handle_database_error)

    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(cars_router.router, tags=["cars"])
    app.include_router(bids_router.router, tags=["bids"])

    @app.get("/health")
    async def health(database: db.Database = Depends(db.get_database)) -> dict:
        if not await database.ping():
            raise db.DatabaseError("Database ping returned an unexpected result.")
        return {"status": "ok", "database": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": "AutoBid API"}

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=config.port(), log_level=config.log_level().lower())
