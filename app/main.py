import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.api.routes import auth
from app.api.routes import bookings as bookings_router
from app.api.routes import notifications as notifications_router
from app.api.routes import products as products_router
from app.api.routes import ratings as ratings_router
from app.api.routes import users as users_router
from app.core.config import get_settings
from app.core.exceptions import error_body
from app.core.logging import configure_logging
from app.db.base import Base, SessionLocal, engine
from app.db.models import document  # noqa: F401  registers the documents table
from app.db.store import DocumentStore
from app.services.products import ProductService

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Rental Marketplace API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
def http_error_handler(request: Request, exc: HTTPException):
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, message),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content=error_body(400, problems or "Invalid request"))


@app.on_event("startup")
def startup():
    Base.metadata.create_all(bind=engine)

    if settings.seed_sample_products:
        db = SessionLocal()
        try:
            ProductService(DocumentStore(db)).seed_sample_products()
        finally:
            db.close()


@app.get("/")
def root():
    return {"message": "Rental Marketplace API running"}


app.include_router(auth.router)
app.include_router(users_router.router)
app.include_router(bookings_router.router)
app.include_router(notifications_router.router)
app.include_router(ratings_router.router)
app.include_router(products_router.router)
