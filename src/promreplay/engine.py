"""Replay engine.

Ties a loaded ReplayConfig to a Prometheus registry, the per-series workers
and the HTTP scrape endpoint.
"""

from __future__ import annotations

import threading

import uvicorn
from prometheus_client import REGISTRY, CollectorRegistry

from promreplay.config import ServerSettings, get_server_settings
from promreplay.exceptions import RegistrationError, ReplayError
from promreplay.logger import logger
from promreplay.models.config import ReplayConfig
from promreplay.models.family import RegisteredFamily, register
from promreplay.scheduler import Clock, SeriesWorker, local_now, workers_for
from promreplay.server import create_app

__all__ = ["ReplayEngine"]


class ReplayEngine:
    """Registers metric families, runs their series workers and serves scrapes.

    Startup is all or nothing: if any family fails to register, the families
    registered before it are removed again and nothing is served.
    """

    def __init__(
        self,
        config: ReplayConfig,
        registry: CollectorRegistry = REGISTRY,
        settings: ServerSettings | None = None,
        clock: Clock = local_now,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Validated replay config
            registry: Registry the gauges are published to
            settings: Server settings (defaults to get_server_settings())
            clock: Source of the instant passed to each tick
        """
        self.config = config
        self.registry = registry
        self.settings = settings or get_server_settings()
        self._clock = clock
        self._stop_event = threading.Event()
        self.registered: list[RegisteredFamily] = []
        self.workers: list[SeriesWorker] = []

    def register_all(self) -> list[RegisteredFamily]:
        """Register every family with the registry.

        Returns:
            Registered families in config order

        Raises:
            RegistrationError: On the first family that fails; earlier
                families are unregistered before the error propagates
        """
        if self.registered:
            raise ReplayError("metric families are already registered")

        registered: list[RegisteredFamily] = []
        try:
            for family in self.config.families:
                registered.append(register(family, self.registry))
        except RegistrationError:
            for entry in reversed(registered):
                self.registry.unregister(entry.gauge)
            raise

        self.registered = registered
        logger.info(f"registered {len(registered)} metric families with {self.config.series_count()} series")
        return registered

    def start_schedulers(self) -> list[SeriesWorker]:
        """Start one worker per registered series.

        Returns:
            The started workers

        Raises:
            ReplayError: If families are not registered yet or workers already run
        """
        if not self.registered and self.config.families:
            raise ReplayError("register_all() must succeed before schedulers start")
        if self.workers:
            raise ReplayError("schedulers are already running")

        self.workers = workers_for(self.registered, self._stop_event, clock=self._clock)
        for worker in self.workers:
            worker.start()
        return self.workers

    def serve(self) -> None:
        """Serve the scrape endpoint until the process ends.

        uvicorn exits the process with a non-zero status if the port cannot be bound.
        """
        app = create_app(self.registry)
        uvicorn.run(
            app,
            host=self.settings.host,
            port=self.config.port,
            log_level=self.settings.log_level.lower(),
            access_log=self.settings.access_log,
        )

    def start(self) -> None:
        """Register all families, start their workers and block serving scrapes.

        Raises:
            RegistrationError: If any family cannot be registered. No worker
                is started and nothing is served in that case.
        """
        self.register_all()
        self.start_schedulers()
        logger.info(f"starting server at {self.config.port}")
        try:
            self.serve()
        finally:
            self.stop()

    def stop(self, timeout: float = 5.0) -> None:
        """Signal every worker to stop and wait for them.

        Args:
            timeout: Maximum time to wait per worker
        """
        self._stop_event.set()
        for worker in self.workers:
            worker.join(timeout)
