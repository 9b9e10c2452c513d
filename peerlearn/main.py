import os

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import accounts, config
from .database import Base, SessionLocal, engine
from .errors import PeerLearnError
from .log import configure_logging
from .routers import admin, auth, courses, orders, users
from .seed import seed_demo_data

configure_logging()
logger = structlog.get_logger(__name__)

# -------------------- APP --------------------

app = FastAPI(title="PeerLearn Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origin_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

os.makedirs(config.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR), name="uploads")

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(courses.router)
app.include_router(orders.router)
app.include_router(admin.router)

# -------------------- ERRORS --------------------


@app.exception_handler(PeerLearnError)
async def peerlearn_error_handler(request: Request, exc: PeerLearnError):
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message)
    else:
        logger.info("request_rejected", path=request.url.path, status=exc.status_code, code=exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details[field or "body"] = error.get("msg")
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request data", "code": "validation_error", "details": details},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", path=request.url.path)
    return JSONResponse(status_code=500, content={"message": "Server error"})


# -------------------- STARTUP --------------------


@app.on_event("startup")
def startup():
    Base.metadata.create_all(bind=engine, checkfirst=True)

    db = SessionLocal()
    try:
        accounts.ensure_admin(db)
        if config.SEED_DEMO_DATA:
            seed_demo_data(db)
    finally:
        db.close()

    logger.info("startup_complete", database=engine.url.render_as_string(hide_password=True))


@app.get("/")
def read_root():
    return {"status": "online", "message": "PeerLearn API is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
