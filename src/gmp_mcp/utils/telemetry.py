"""OpenTelemetry tracing for tool dispatch, upstream calls and sessions.

Only ``opentelemetry-api`` is a hard dependency. Until
:func:`configure_telemetry` installs an SDK provider, ``get_tracer()``
hands out no-op tracers and the spans opened in
:mod:`gmp_mcp.protocol.dispatcher`, :mod:`gmp_mcp.upstream.client` and
:mod:`gmp_mcp.transport.sessions` cost nothing.

Usage::

    from gmp_mcp.utils.telemetry import ATTR_TOOL_NAME, get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("tool.dispatch") as span:
        span.set_attribute(ATTR_TOOL_NAME, "GoogleMapsPlatformWeatherLookup")

Exporting spans needs the ``otel`` extra: ``pip install gmp-mcp[otel]``.
"""

from __future__ import annotations

import sys
from typing import Any

from opentelemetry import trace

from gmp_mcp import __version__

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_TOOL_NAME = "gmp.tool.name"
ATTR_TOOL_STATUS = "gmp.tool.status"
ATTR_UPSTREAM_PATH = "gmp.upstream.path"
ATTR_HTTP_STATUS = "gmp.upstream.status_code"
ATTR_SESSION_ID = "gmp.session.id"

_INSTRUMENTATION_NAME = "gmp_mcp"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a tracer for *name*; a no-op one while no SDK is configured."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME, __version__)


def configure_telemetry(
    *,
    service_name: str = "gmp-mcp",
    service_version: str = __version__,
    export_to_console: bool = False,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider for this process.

    Parameters
    ----------
    service_name, service_version:
        ``service.name`` / ``service.version`` resource attributes.
    export_to_console:
        Print finished spans as JSON on stderr. stdout is left alone so the
        stdio transport keeps a clean protocol stream.
    otlp_endpoint:
        If set, batch-export spans via OTLP/gRPC to this endpoint.

    Raises
    ------
    ImportError
        If ``opentelemetry-sdk`` (or, with *otlp_endpoint*, the OTLP
        exporter) is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install gmp-mcp[otel]"
        )
        raise ImportError(msg) from exc

    resource = Resource.create({"service.name": service_name, "service.version": service_version})  # pyright: ignore[reportUnknownVariableType,reportUnknownMemberType]
    provider = TracerProvider(resource=resource)  # pyright: ignore[reportUnknownVariableType]

    if export_to_console:
        _add_console_exporter(provider, SimpleSpanProcessor)

    if otlp_endpoint:
        _add_otlp_exporter(provider, BatchSpanProcessor, otlp_endpoint)

    trace.set_tracer_provider(provider)  # pyright: ignore[reportUnknownArgumentType]


def _add_console_exporter(provider: Any, processor_cls: Any) -> None:
    from opentelemetry.sdk.trace.export import ConsoleSpanExporter  # pyright: ignore[reportMissingImports,reportUnknownVariableType]

    provider.add_span_processor(processor_cls(ConsoleSpanExporter(out=sys.stderr)))


def _add_otlp_exporter(provider: Any, processor_cls: Any, endpoint: str) -> None:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install gmp-mcp[otel]"
        )
        raise ImportError(msg) from exc

    provider.add_span_processor(processor_cls(OTLPSpanExporter(endpoint=endpoint)))
