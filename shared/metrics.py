"""
Shared metrics configuration for the Access Authorization Service.
"""

from typing import Dict, Any, Optional

from prometheus_client import Counter, Histogram, Info, CollectorRegistry, generate_latest


class MetricsCollector:
    """Centralized metrics collector for services.

    Each collector owns its registry so that several application instances
    (one per test, for example) can coexist in one process.
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up common metrics for the service."""

        # Service info
        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        # HTTP metrics
        self._metrics["http_requests_total"] = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=self.registry
        )

        self._metrics["http_request_duration_seconds"] = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=self.registry
        )

        # Health check metrics
        self._metrics["health_check_total"] = Counter(
            "health_check_total",
            "Total health check requests",
            ["status"],
            registry=self.registry
        )

        # Error metrics
        self._metrics["errors_total"] = Counter(
            "errors_total",
            "Total errors",
            ["error_type", "service"],
            registry=self.registry
        )

        self._setup_authorization_metrics()

    def _setup_authorization_metrics(self):
        """Set up authorization-specific metrics."""
        self._metrics["authorization_decisions_total"] = Counter(
            "authorization_decisions_total",
            "Total authorization decisions",
            ["layer", "decision"],
            registry=self.registry
        )

        self._metrics["authorization_decision_duration_seconds"] = Histogram(
            "authorization_decision_duration_seconds",
            "Authorization decision duration in seconds",
            ["layer"],
            registry=self.registry
        )

        self._metrics["authentication_attempts_total"] = Counter(
            "authentication_attempts_total",
            "Total authentication attempts",
            ["outcome"],
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def export(self) -> bytes:
        """Render the registry in the Prometheus text format."""
        return generate_latest(self.registry)

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        """Record HTTP request metrics."""
        self._metrics["http_requests_total"].labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()

        self._metrics["http_request_duration_seconds"].labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)

    def record_health_check(self, status: str):
        """Record health check metrics."""
        self._metrics["health_check_total"].labels(status=status).inc()

    def record_error(self, error_type: str, service: Optional[str] = None):
        """Record error metrics."""
        service_name = service or self.service_name
        self._metrics["errors_total"].labels(error_type=error_type, service=service_name).inc()

    def record_decision(self, layer: str, decision: str, duration: float):
        """Record an authorization decision."""
        self._metrics["authorization_decisions_total"].labels(layer=layer, decision=decision).inc()
        self._metrics["authorization_decision_duration_seconds"].labels(layer=layer).observe(duration)

    def record_authentication(self, outcome: str):
        """Record an authentication attempt outcome."""
        self._metrics["authentication_attempts_total"].labels(outcome=outcome).inc()

    def sample(self, metric_name: str, **labels) -> Optional[float]:
        """Read back the current value of a counter sample."""
        return self.registry.get_sample_value(metric_name, labels)


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
