# canteen/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from canteen.api.routers import carts, catalog, health, orders
from canteen.data.database import SessionLocal, check_connection, dispose_engine, init_db
from canteen.data.seed import seed_db
from canteen.utils.logging import get_logger
from canteen.utils.settings import SEED_ON_STARTUP

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # pula polaczen zyje tyle co proces
    logger.info("Initializing database...")
    check_connection()
    init_db()

    if SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_db(db)
        finally:
            db.close()

    yield

    dispose_engine()


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # bledne body -> 400 jak w starym API, zamiast domyslnego 422
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        detail = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        detail = "Invalid request"
    logger.warning(f"Rejected request {request.method} {request.url.path}: {detail}")
    return JSONResponse(status_code=400, content={"detail": detail})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Canteen Ordering Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(catalog.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
