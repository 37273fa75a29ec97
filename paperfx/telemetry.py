"""OpenTelemetry metrics and logs for PaperFX.

Everything here is a no-op until setup_telemetry() succeeds, so services
can record unconditionally.
"""

import logging
import os
from dataclasses import dataclass
from decimal import Decimal

from opentelemetry import metrics
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.metrics import Counter, Meter, UpDownCounter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from paperfx._version import VERSION

METRIC_PREFIX = "paperfx"


@dataclass
class Instruments:
    """The account and trading counters."""

    accounts_registered: Counter
    positions_opened: Counter
    positions_closed: Counter
    notional_opened: Counter
    # Realized P&L can be negative
    realized_pnl: UpDownCounter
    login_failures: Counter

    @classmethod
    def create(cls, meter: Meter) -> "Instruments":
        def counter(name: str, description: str, unit: str = "1") -> Counter:
            return meter.create_counter(
                f"{METRIC_PREFIX}_{name}_total", description=description, unit=unit
            )

        return cls(
            accounts_registered=counter("accounts_registered", "Accounts registered"),
            positions_opened=counter("positions_opened", "Positions opened"),
            positions_closed=counter("positions_closed", "Positions closed"),
            notional_opened=counter(
                "notional_opened", "Notional reserved by opened positions", "currency"
            ),
            realized_pnl=meter.create_up_down_counter(
                f"{METRIC_PREFIX}_realized_pnl_total",
                description="Net realized profit/loss of closed positions",
                unit="currency",
            ),
            login_failures=counter("login_failures", "Rejected login attempts"),
        )


_instruments: Instruments | None = None
_log_handler: LoggingHandler | None = None


def _build_log_handler(resource: Resource, endpoint: str) -> LoggingHandler:
    provider = LoggerProvider(resource=resource)
    provider.add_log_record_processor(
        BatchLogRecordProcessor(OTLPLogExporter(endpoint=endpoint))
    )
    set_logger_provider(provider)
    return LoggingHandler(level=logging.INFO, logger_provider=provider)


def setup_telemetry() -> bool:
    """Initialize OTLP metric and log export.

    Configured by OTLP_ENABLED, OTLP_ENDPOINT (metrics URL; the logs URL is
    derived from it) and OTLP_EXPORT_INTERVAL in milliseconds.

    Returns True if telemetry is active, False if disabled.
    """
    global _instruments, _log_handler

    if _instruments is not None:
        return True
    if os.getenv("OTLP_ENABLED", "true").lower() == "false":
        return False

    metrics_endpoint = os.getenv("OTLP_ENDPOINT", "http://localhost:4318/v1/metrics")
    interval_ms = int(os.getenv("OTLP_EXPORT_INTERVAL", "5000"))
    resource = Resource.create(
        {"service.name": METRIC_PREFIX, "service.version": VERSION}
    )

    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=metrics_endpoint),
        export_interval_millis=interval_ms,
    )
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=[reader]))

    _log_handler = _build_log_handler(
        resource, metrics_endpoint.replace("/v1/metrics", "/v1/logs")
    )
    _instruments = Instruments.create(metrics.get_meter(METRIC_PREFIX, VERSION))
    return True


def get_log_handler() -> LoggingHandler | None:
    """OTLP handler for the root logger, once telemetry is set up."""
    return _log_handler


# --- Recording ---

def record_account_registered() -> None:
    if _instruments is None:
        return
    _instruments.accounts_registered.add(1)


def record_position_opened(symbol: str, side: str, notional: Decimal) -> None:
    """Count an opened position and the notional it reserved."""
    if _instruments is None:
        return
    attributes = {"symbol": symbol, "side": side}
    _instruments.positions_opened.add(1, attributes)
    _instruments.notional_opened.add(float(notional), attributes)


def record_position_closed(symbol: str, side: str, pnl: Decimal) -> None:
    """Count a closed position and add its realized P&L."""
    if _instruments is None:
        return
    attributes = {"symbol": symbol, "side": side}
    _instruments.positions_closed.add(1, attributes)
    _instruments.realized_pnl.add(float(pnl), attributes)


def record_login_failure() -> None:
    if _instruments is None:
        return
    _instruments.login_failures.add(1)
