"""structlog setup for the media service.

One processor chain serves both structlog loggers and the standard-library
loggers used by httpx and uvicorn:

    merge_contextvars -> add_log_level -> StackInfoRenderer -> set_exc_info
        -> TimeStamper(iso) -> ConsoleRenderer | JSONRenderer

JSON output is used when ``APP_ENV=production`` or when forced by the caller;
everything else gets the coloured console renderer.  Request-scoped keys
(``request_id``) are bound through contextvars by the request middleware and
appear on every line logged while that request is being served.
"""

import logging
import os
import sys

import structlog

# Per-request lines from these libraries duplicate ``http_request`` and
# ``upstream_request_retry`` events; keep only their warnings.
_CHATTY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def _build_renderer(use_json: bool) -> structlog.types.Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Install the processor chain for structlog and the stdlib root logger.

    Args:
        log_level: Minimum level name, e.g. ``"DEBUG"`` or ``"WARNING"``.
        json_output: Render JSON regardless of ``APP_ENV``.

    Returns:
        A logger bound to the freshly configured chain.
    """
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"
    level = log_level.upper()

    # merge_contextvars must run first so request bindings sit under the
    # level and timestamp keys.
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer = _build_renderer(use_json)

    structlog.configure(
        processors=[*pre_chain, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    stdlib_handler = logging.StreamHandler(sys.stdout)
    stdlib_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *pre_chain,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(stdlib_handler)
    root.setLevel(level)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))

    return structlog.get_logger()


def bind_request_context(**values: object) -> None:
    """Attach *values* to every log line emitted by the current request task."""
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger tagged with ``logger_name=name``.

    Logging is configured with defaults on first use, so modules can create
    their loggers at import time before ``main`` applies the real settings.
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)
