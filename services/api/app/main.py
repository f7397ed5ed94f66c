from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import json
import logging
from typing import Any, Dict, Optional

from .config import settings
from .ingest import Aggregator
from .models import ArticlesOut
from .scheduler import build_scheduler

logger = logging.getLogger(__name__)


def create_app(aggregator: Optional[Aggregator] = None, *, schedule: Optional[bool] = None) -> FastAPI:
    aggregator = aggregator or Aggregator()
    schedule = settings.scheduler_enabled if schedule is None else schedule
    store = aggregator.store

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if schedule:
            sched = build_scheduler(aggregator)
            sched.start()
            app.state.scheduler = sched
        else:
            logger.info("scheduler disabled")
        try:
            yield
        finally:
            sched = app.state.scheduler
            if sched is not None:
                sched.shutdown(wait=False)
                app.state.scheduler = None

    app = FastAPI(title="Tibet News Aggregator", version="1.0.0", lifespan=lifespan)
    app.state.aggregator = aggregator
    app.state.scheduler = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list(),
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        snap = store.snapshot
        return {
            "ok": True,
            "articles": len(snap.articles),
            "refreshed_at": snap.refreshed_at,
            "sources": dict(snap.per_source),
        }

    @app.get("/api/articles", response_model=ArticlesOut)
    def articles():
        # One reference read: the whole response comes from a single snapshot.
        return {"articles": list(store.articles())}

    return app


app = create_app()


def _setup_logging() -> None:
    level = settings.log_level.upper().strip() or "INFO"
    logging.basicConfig(level=level, format="%(message)s")

    class JsonFormatter(logging.Formatter):
        def format(self, record: logging.LogRecord) -> str:
            payload: Dict[str, Any] = {
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
            }
            return json.dumps(payload, ensure_ascii=False)

    root = logging.getLogger()
    for h in root.handlers:
        h.setFormatter(JsonFormatter())


def serve() -> None:
    import uvicorn

    _setup_logging()
    logger.info("Backend running at http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    serve()
