"""Event-tagged logging for the focos fetch and normalize steps.

Events in use: ``focos.fetch`` (WFS requests, orchestrator token lifecycle)
and ``focos.normalize`` (dataset build summaries, tolerated feature defects).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping


def _encode_context(context: Mapping[str, Any]) -> str:
    """Render the context mapping as sorted JSON for the log line."""
    try:
        return json.dumps(context, default=str, sort_keys=True)
    except TypeError:
        safe_ctx = {str(k): str(v) for k, v in context.items()}
        return json.dumps(safe_ctx, sort_keys=True)


def log_event(
    logger: logging.Logger,
    event: str,
    message: str,
    *,
    level: str = "info",
    **fields: Any,
) -> None:
    """Emit ``[event] message | {context}`` and attach the context as ``extra``.

    ``None`` fields are dropped, so an absent feature id or satellite does not
    show up as ``null`` in the context. The context is attached as
    ``record.context`` for handlers that ship structured logs.

    Example:
        log_event(LOGGER, "focos.normalize", "Leaving unparsable timestamp untouched",
                  level="debug", feature_id="focos.42", value="not-a-date")
    """

    context = {k: v for k, v in fields.items() if v is not None}
    payload = f"[{event}] {message}"
    if context:
        payload = f"{payload} | {_encode_context(context)}"

    log_fn = getattr(logger, level, logger.info)
    log_fn(payload, extra={"event": event, "context": context})
