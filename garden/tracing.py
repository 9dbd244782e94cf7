from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

# probes are too chatty to trace
EXCLUDED_URLS = "health/live,health/ready"


def init_tracing(app):
    config = app.config
    resource = Resource.create({
        "service.name": config["OTEL_SERVICE_NAME"],
        "service.version": config["APP_VERSION"],
        "deployment.environment": config["APP_ENV"],
    })
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=config["OTEL_EXPORTER_OTLP_ENDPOINT"])))
    trace.set_tracer_provider(provider)
    FlaskInstrumentor().instrument_app(app, excluded_urls=EXCLUDED_URLS)
    app.logger.info(
        "OpenTelemetry tracing %s@%s -> %s",
        config["OTEL_SERVICE_NAME"], config["APP_VERSION"], config["OTEL_EXPORTER_OTLP_ENDPOINT"],
    )
    return provider
