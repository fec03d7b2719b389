"""Application wiring for Daybook.

Configuration, database setup, routers and error handling are assembled here.
Importing the package yields a ready ``app``; ``daybook.main`` adds logging and
metrics for a deployed process.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import (
    OperationFailed,
    http_exception_handler,
    operation_failed_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from .db.migrate import run_migrations
from .db.session import Base, engine
from .middlewares import RequestIdMiddleware

# Importing the SQLAlchemy models registers them with the metadata. Without
# this step ``Base.metadata.create_all`` would not know about our tables.
from .models import user as _user  # noqa: F401
from .models import session as _session  # noqa: F401
from .models import entry as _entry  # noqa: F401
from .models import category as _category  # noqa: F401
from .models import reflection as _reflection  # noqa: F401

app = FastAPI(title=settings.APP_NAME)

# ---------- DB init/migrations ----------
Base.metadata.create_all(bind=engine)
run_migrations(engine)

app.add_middleware(RequestIdMiddleware)

# ---------- Routers ----------
from .routers import api_auth as api_auth_router  # noqa: E402

app.include_router(api_auth_router.router)

from .routers import api_entries as api_entries_router  # noqa: E402

app.include_router(api_entries_router.router)

from .routers import api_categories as api_categories_router  # noqa: E402

app.include_router(api_categories_router.router)

from .routers import api_reflections as api_reflections_router  # noqa: E402

app.include_router(api_reflections_router.router)

# ---------- Exception handling ----------
app.add_exception_handler(OperationFailed, operation_failed_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(SQLAlchemyError, unhandled_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


@app.get("/health", tags=["health"])
def health() -> dict[str, bool]:
    return {"ok": True}


__all__ = ["app"]
