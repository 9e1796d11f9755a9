"""Application bootstrap for the CloudGraph HTTP service.

Startup order: config -> logging -> pipeline -> REST. uvicorn owns SIGINT
and SIGTERM; when it exits the app shuts down.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import uvicorn

from cloudgraph import __version__
from cloudgraph.analysis.pipeline import AnalysisPipeline
from cloudgraph.api import build_app
from cloudgraph.config import load_config
from cloudgraph.models.config import CloudGraphConfig
from cloudgraph.observability.logging import get_logger, setup_logging

if TYPE_CHECKING:
    import structlog

_SHUTDOWN_GRACE_SECONDS = 15


class CloudGraphApp:
    """Owns the pipeline and the uvicorn server.

    ``stop()`` is safe to call on an app that never started.
    """

    def __init__(self) -> None:
        self.config: CloudGraphConfig | None = None
        self._server: uvicorn.Server | None = None
        self._serve_task: asyncio.Task[None] | None = None
        self._log: structlog.stdlib.BoundLogger | None = None

    @property
    def running(self) -> bool:
        return self._serve_task is not None and not self._serve_task.done()

    async def start(self) -> None:
        self.config = load_config()
        setup_logging(self.config.log.level)
        self._log = get_logger("app")

        self._log.info("cloudgraph_starting", version=__version__)

        fastapi_app = build_app(pipeline=AnalysisPipeline(), config=self.config)
        self._server = uvicorn.Server(
            uvicorn.Config(
                app=fastapi_app,
                host=self.config.api.host,
                port=self.config.api.port,
                log_config=None,  # structlog handles all logging
                access_log=False,
            )
        )
        self._serve_task = asyncio.create_task(self._server.serve(), name="rest-server")
        self._log.info("rest_api_started", host=self.config.api.host, port=self.config.api.port)

    async def wait(self) -> None:
        if self._serve_task is not None:
            await self._serve_task

    async def stop(self) -> None:
        if self._server is None or self._serve_task is None:
            return
        log = self._log or get_logger("app")
        log.info("cloudgraph_shutting_down")

        self._server.should_exit = True
        if not self._serve_task.done():
            try:
                await asyncio.wait_for(self._serve_task, timeout=_SHUTDOWN_GRACE_SECONDS)
            except TimeoutError:
                log.warning("rest_stop_timed_out", timeout=_SHUTDOWN_GRACE_SECONDS)
                self._serve_task.cancel()
        self._serve_task = None
        self._server = None
        log.info("cloudgraph_stopped")


async def main() -> None:
    """Serve until uvicorn exits, then shut down."""
    app = CloudGraphApp()
    await app.start()
    try:
        await app.wait()
    finally:
        await app.stop()
