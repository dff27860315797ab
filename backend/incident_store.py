"""Atlas Backend: Incident store (TTL snapshot + single in-flight reload)"""

import asyncio
import logging
import time
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from config import INCIDENT_CACHE_TTL, INCIDENT_RELOAD_TIMEOUT
from coordinates import CoordinateResolver
from filters import IncidentFilters, filter_incidents
from incident_loader import load_incidents
from models import Incident

logger = logging.getLogger("atlas.store")


@dataclass(frozen=True)
class Loaded:
    incidents: tuple[Incident, ...]
    loaded_at: float
    stale: bool = False  # True when a reload failed and this is the last good snapshot


@dataclass(frozen=True)
class LoadFailed:
    reason: str


LoadResult = Union[Loaded, LoadFailed]


class IncidentStore:
    """Process-wide holder of the parsed incident collection.

    The collection and its load time live in one immutable ``Loaded`` snapshot
    that is replaced wholesale after a reload completes. Concurrent callers
    that find the snapshot missing or expired all await the same reload.
    A failed reload keeps the previous snapshot and is retried on next access.
    A loader thread that outlives its timeout is never started twice: later
    reloads wait on it, and its result is published when it finishes.
    """

    def __init__(
        self,
        loader: Callable[[], Sequence[Incident]],
        ttl: float = INCIDENT_CACHE_TTL,
        reload_timeout: Optional[float] = INCIDENT_RELOAD_TIMEOUT,
        clock: Callable[[], float] = time.time,
    ):
        self._loader = loader
        self._ttl = ttl
        self._reload_timeout = reload_timeout
        self._clock = clock
        self._snapshot: Optional[Loaded] = None
        self._reload: Optional[asyncio.Future] = None
        self._worker: Optional[asyncio.Future] = None
        self._published_worker: Optional[asyncio.Future] = None
        self._late_worker: Optional[asyncio.Future] = None
        self.reload_count = 0

    @classmethod
    def from_csv(
        cls,
        path: Union[str, Path],
        resolver: Optional[CoordinateResolver] = None,
        **kwargs,
    ) -> "IncidentStore":
        return cls(partial(load_incidents, path, resolver or CoordinateResolver()), **kwargs)

    # ── state ────────────────────────────────────────────────────

    def age(self) -> Optional[float]:
        if self._snapshot is None:
            return None
        return max(self._clock() - self._snapshot.loaded_at, 0.0)

    def is_fresh(self) -> bool:
        age = self.age()
        return age is not None and age <= self._ttl

    @property
    def incident_count(self) -> int:
        return len(self._snapshot.incidents) if self._snapshot else 0

    @property
    def reloading(self) -> bool:
        return self._reload is not None or (self._worker is not None and not self._worker.done())

    def invalidate(self):
        """Force a reload on next access. The current snapshot stays as fallback."""
        if self._snapshot is not None:
            self._snapshot = Loaded(self._snapshot.incidents, self._clock() - self._ttl - 1)

    # ── access ───────────────────────────────────────────────────

    async def get(self) -> LoadResult:
        snapshot = self._snapshot
        if snapshot is not None and self.is_fresh():
            logger.debug("Using cached incidents")
            return snapshot

        if self._reload is None:
            logger.info("Cache miss or expired. Loading incidents...")
            self._reload = asyncio.ensure_future(self._run_reload())
        # shield: a cancelled request must not abort the reload other callers await
        return await asyncio.shield(self._reload)

    async def get_filtered_incidents(self, filters: Optional[IncidentFilters] = None) -> LoadResult:
        result = await self.get()
        if isinstance(result, LoadFailed):
            return result
        matched = filter_incidents(result.incidents, filters)
        return Loaded(tuple(matched), result.loaded_at, result.stale)

    # ── reload ───────────────────────────────────────────────────

    def _start_worker(self) -> asyncio.Future:
        """Loader thread future, reused while a previous one is still running."""
        if self._worker is None or self._worker.done():
            self._worker = asyncio.ensure_future(asyncio.to_thread(self._loader))
        else:
            logger.warning("Previous reload still running; waiting on it instead of starting another")
        return self._worker

    async def _run_reload(self) -> LoadResult:
        self.reload_count += 1
        t0 = time.perf_counter()
        worker = self._start_worker()
        try:
            # shield: timing out must leave the worker running so it is not started twice
            incidents = await asyncio.wait_for(
                asyncio.shield(worker), timeout=self._reload_timeout,
            )
        except asyncio.TimeoutError:
            if worker is not self._late_worker:
                self._late_worker = worker
                worker.add_done_callback(self._publish_late)
            return self._reload_failed(f"Reload timed out after {self._reload_timeout:.0f}s")
        except Exception as e:
            return self._reload_failed(str(e) or e.__class__.__name__)
        finally:
            self._reload = None

        self._publish(worker, incidents)
        dt = (time.perf_counter() - t0) * 1000
        logger.info(f"Loaded and cached {len(self._snapshot.incidents)} incidents ({dt:.0f}ms)")
        return self._snapshot

    def _publish(self, worker: asyncio.Future, incidents: Sequence[Incident]):
        if worker is self._published_worker:
            return
        self._published_worker = worker
        self._snapshot = Loaded(tuple(incidents), self._clock())

    def _publish_late(self, worker: asyncio.Future):
        """Done callback for a worker whose caller already timed out."""
        if worker.cancelled():
            return
        if worker.exception() is not None:
            logger.error(f"Timed-out reload failed: {worker.exception()}")
            return
        if worker is not self._published_worker:
            self._publish(worker, worker.result())
            logger.info(f"Late reload finished; cached {len(self._snapshot.incidents)} incidents")

    def _reload_failed(self, reason: str) -> LoadResult:
        logger.error(f"Failed to load incidents: {reason}")
        if self._snapshot is not None:
            logger.warning(
                f"Serving last known good collection ({len(self._snapshot.incidents)} incidents)"
            )
            return Loaded(self._snapshot.incidents, self._snapshot.loaded_at, stale=True)
        return LoadFailed(reason)
