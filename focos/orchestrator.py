"""Fetch orchestration: one explicit state value, last-write-wins.

Usage
-----
    orchestrator = FetchOrchestrator()
    state = orchestrator.fetch(default_query())
    if state.error:
        ...  # show the message; state.dataset still holds the previous data

Callers that run requests concurrently use the lower-level lifecycle::

    token = orchestrator.begin(query)
    ...  # network call, possibly on another thread
    orchestrator.complete(token, payload)   # or orchestrator.fail(token, message)

A completion is applied only if no newer request has already settled, so a
slow stale response never replaces a fresher dataset or masks the error of
the latest request.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Tuple

from focos.logging_utils import log_event
from focos.models import FetchQuery, FlatRecord
from focos.normalizer import DisplayFormat, NormalizationSummary, build_dataset_with_summary
from focos.wfs_client import WFSClientError, fetch_feature_collection

LOGGER = logging.getLogger(__name__)

Fetcher = Callable[[FetchQuery], Any]
FETCH_ERROR_MESSAGE = "Failed to fetch focos data."


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class FetchState:
    """Snapshot handed to the UI. ``generation`` is the token that produced ``dataset``."""

    status: FetchStatus = FetchStatus.IDLE
    query: FetchQuery | None = None
    dataset: Tuple[FlatRecord, ...] = ()
    error: str | None = None
    generation: int = 0
    summary: NormalizationSummary | None = None

    @property
    def loading(self) -> bool:
        return self.status is FetchStatus.LOADING

    @property
    def records(self) -> list[FlatRecord]:
        return list(self.dataset)


class FetchOrchestrator:
    def __init__(self, fetcher: Fetcher | None = None, display: DisplayFormat | None = None) -> None:
        self._fetcher = fetcher or fetch_feature_collection
        self._display = display
        self._lock = threading.Lock()
        self._issued = 0
        self._settled = 0
        self._state = FetchState()

    @property
    def state(self) -> FetchState:
        with self._lock:
            return self._state

    def begin(self, query: FetchQuery) -> int:
        """Register a new request and move to ``loading``; returns its token."""
        with self._lock:
            self._issued += 1
            token = self._issued
            self._state = replace(self._state, status=FetchStatus.LOADING, query=query, error=None)
        log_event(LOGGER, "focos.fetch", "Fetch started", token=token, **query.to_dict())
        return token

    def complete(self, token: int, payload: Any) -> bool:
        """Build and apply the dataset for ``token`` unless a newer one already landed."""
        records, summary = build_dataset_with_summary(payload, self._display)
        with self._lock:
            settled = self._settled
            if token <= settled:
                stale = True
            else:
                stale = False
                self._settled = token
                latest = token == self._issued
                self._state = replace(
                    self._state,
                    status=FetchStatus.SUCCESS if latest else FetchStatus.LOADING,
                    dataset=tuple(records),
                    error=None,
                    generation=token,
                    summary=summary,
                )
        if stale:
            log_event(
                LOGGER,
                "focos.fetch",
                "Discarding stale response",
                level="warning",
                token=token,
                settled=settled,
            )
            return False
        log_event(LOGGER, "focos.fetch", "Dataset replaced", token=token, records=len(records))
        return True

    def fail(self, token: int, message: str = FETCH_ERROR_MESSAGE) -> bool:
        """Surface ``message`` if ``token`` is the latest request; the dataset is kept."""
        with self._lock:
            latest = token == self._issued
            if latest:
                # Older responses still in flight are stale once the latest request has failed.
                self._settled = token
                self._state = replace(self._state, status=FetchStatus.ERROR, error=message)
        log_event(
            LOGGER,
            "focos.fetch",
            "Fetch failed" if latest else "Ignoring failure of superseded request",
            level="error" if latest else "warning",
            token=token,
            error=message,
        )
        return latest

    def fetch(self, query: FetchQuery) -> FetchState:
        """Run one request end to end. Transport failures become ``state.error``; no retry.

        Any other exception from the fetcher is re-raised after the request
        is settled as failed, so the state never stays at ``loading``.
        """
        token = self.begin(query)
        try:
            payload = self._fetcher(query)
        except WFSClientError as exc:
            self.fail(token, f"{FETCH_ERROR_MESSAGE} {exc}")
        except Exception as exc:
            self.fail(token, f"{FETCH_ERROR_MESSAGE} {type(exc).__name__}: {exc}")
            raise
        else:
            self.complete(token, payload)
        return self.state
