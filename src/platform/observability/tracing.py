"""
OpenTelemetry tracing configuration

Provides:
- Tracer provider with an OTLP exporter (Jaeger/Tempo) when an endpoint is set
- Auto-instrumentation for FastAPI and the SQLAlchemy write/read engines
- Manual spans come from `trace.get_tracer(__name__)` in each module
"""

import os
from typing import Any, Iterable

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON


class TracingConfig:
    """
    Usage:
        tracing = TracingConfig(service_name='cinema-booking')
        tracing.setup()
        tracing.instrument_sqlalchemy(engines=[get_engine(), get_engine(read_only=True)])
        ...
        tracing.shutdown()
    """

    def __init__(
        self,
        *,
        service_name: str,
        otlp_endpoint: str | None = None,
        enable_console: bool = False,
    ) -> None:
        self.service_name = service_name
        self.otlp_endpoint = otlp_endpoint or os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT')
        self.enable_console = (
            enable_console or os.getenv('OTEL_CONSOLE_EXPORT', 'false').lower() == 'true'
        )

        self._provider: TracerProvider | None = None

    def setup(self) -> None:
        """Install the global tracer provider. Call once at startup."""
        resource = Resource(attributes={SERVICE_NAME: self.service_name})

        # Keep every span; volume control belongs to tail sampling in the collector
        self._provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)

        if self.otlp_endpoint:
            self._provider.add_span_processor(
                BatchSpanProcessor(OTLPSpanExporter(endpoint=self.otlp_endpoint))
            )

        if self.enable_console:
            self._provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

        trace.set_tracer_provider(self._provider)

    def instrument_fastapi(self, *, app: Any, excluded_urls: str = 'health,metrics') -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded_urls)

    def instrument_sqlalchemy(self, *, engines: Iterable[Any]) -> None:
        # AsyncEngine wraps a sync engine; the instrumentor hooks the sync one
        sync_engines = {
            getattr(engine, 'sync_engine', engine) for engine in engines if engine is not None
        }
        for engine in sync_engines:
            SQLAlchemyInstrumentor().instrument(engine=engine)

    def shutdown(self) -> None:
        """Flush pending spans"""
        if self._provider:
            self._provider.shutdown()
