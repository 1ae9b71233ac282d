from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from .core.config import settings
from .core.errors import InvalidFilterError, InvalidPageError, NonUniqueResultError
from .core.logging import setup_logging
from .db.base import Base
from .db.session import engine
from .api.routes import router


app = FastAPI(title="Member Search API", version="0.1.0")

@app.on_event("startup")
def on_startup():
    setup_logging(settings.LOG_LEVEL)
    Base.metadata.create_all(bind=engine)

@app.exception_handler(NonUniqueResultError)
def non_unique_handler(request: Request, exc: NonUniqueResultError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})

@app.exception_handler(InvalidFilterError)
@app.exception_handler(InvalidPageError)
def bad_request_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})

@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}

# ✅ Register routes
app.include_router(router)
