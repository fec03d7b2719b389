from prometheus_fastapi_instrumentator import Instrumentator

from daybook.core.config import settings
from daybook.core.logging import setup_logging
from . import app as daybook_app

setup_logging()
app = daybook_app
app.title = settings.APP_NAME
instrumentator = Instrumentator()
instrumentator.instrument(app).expose(app, include_in_schema=False)


def run() -> None:
    import uvicorn

    uvicorn.run("daybook.main:app", host=settings.HOST, port=settings.PORT)
