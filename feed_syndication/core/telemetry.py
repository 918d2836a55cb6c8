"""
Telemetry configuration (Metrics & Tracing).
Sets up Prometheus instrumentation and OpenTelemetry.
"""
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

from feed_syndication.config import get_settings

# Feed-level counters, labelled by variant ("msn" / "samsung")
FEED_ITEMS_RENDERED = Counter(
    "feed_items_rendered_total",
    "Number of <item> elements rendered into syndication feeds",
    ["variant"],
)
HERO_BLOCKS_SKIPPED = Counter(
    "feed_hero_blocks_skipped_total",
    "Posts rendered without a hero block (missing, video or invalid image)",
    ["variant"],
)


def setup_telemetry(app: FastAPI) -> None:
    """
    Setup Observability (Metrics & Tracing).

    1. Prometheus Metrics via /metrics
    2. OpenTelemetry Tracing via OTLP
    """
    settings = get_settings()

    # -------------------------------------------------------------------------
    # 1. Prometheus Metrics
    # -------------------------------------------------------------------------
    if settings.ENABLE_PROMETHEUS:
        instrumentator = Instrumentator(
            should_group_status_codes=False,
            should_ignore_untemplated=True,
            should_respect_env_var=True,
            excluded_handlers=["/metrics", "/health", "/health/ready"],
            env_var_name="ENABLE_METRICS",
        )
        instrumentator.instrument(app).expose(app, include_in_schema=False)

    # -------------------------------------------------------------------------
    # 2. OpenTelemetry Tracing
    # -------------------------------------------------------------------------
    if settings.ENABLE_OTEL:
        resource = Resource.create(attributes={
            "service.name": settings.APP_NAME,
            "service.version": settings.APP_VERSION,
            "deployment.environment": "production" if not settings.DEBUG else "development",
        })

        provider = TracerProvider(resource=resource)

        # Default endpoint is localhost:4317
        processor = BatchSpanProcessor(OTLPSpanExporter())
        provider.add_span_processor(processor)

        trace.set_tracer_provider(provider)

        FastAPIInstrumentor.instrument_app(
            app,
            tracer_provider=provider,
            excluded_urls="health,metrics",
        )
