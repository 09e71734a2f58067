# main.py
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from vaxcare import config
from vaxcare.database import Database
from vaxcare.errors import VaxcareError

from vaxcare import appointments as appointments_router
from vaxcare import auth as auth_router
from vaxcare import centers as centers_router
from vaxcare import feedback as feedback_router
from vaxcare import inventory as inventory_router
from vaxcare import notifications as notifications_router
from vaxcare import patients as patients_router
from vaxcare import records as records_router
from vaxcare import vaccines as vaccines_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("vaxcare")


def create_app(database_url: Optional[str] = None) -> FastAPI:
    db = Database(
        database_url or config.DATABASE_URL,
        pool_size=config.DB_POOL_SIZE,
        create_tables=config.DB_CREATE_TABLES,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        for directory in (config.UPLOAD_DIR, config.CERT_DIR):
            Path(directory).mkdir(parents=True, exist_ok=True)
        db.open()
        app.state.db = db
        try:
            yield
        finally:
            db.close()

    app = FastAPI(title="Vaccination Clinic API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---- ERROR ENVELOPES ----
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 401:
            return JSONResponse(
                {"msg": exc.detail}, status_code=401, headers={"WWW-Authenticate": "Bearer"}
            )
        return JSONResponse({"success": False, "msg": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse({"success": False, "msg": "Invalid request"})

    @app.exception_handler(VaxcareError)
    async def business_error(request: Request, exc: VaxcareError):
        return JSONResponse({"success": False, "msg": exc.msg})

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"success": False, "msg": "Server error"}, status_code=500)

    app.include_router(auth_router.router)
    app.include_router(patients_router.router)
    app.include_router(vaccines_router.router)
    app.include_router(centers_router.router)
    app.include_router(inventory_router.router)
    app.include_router(appointments_router.router)
    app.include_router(records_router.router)
    app.include_router(feedback_router.router)
    app.include_router(notifications_router.router)
    app.include_router(notifications_router.admin_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # ---- STATIC FILES ----
    app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR, check_dir=False), name="uploads")
    app.mount("/certificates", StaticFiles(directory=config.CERT_DIR, check_dir=False), name="certificates")

    return app


app = create_app()
