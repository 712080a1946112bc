"""
Métricas Prometheus do collector
"""
from prometheus_client import Counter, Histogram

PAYLOADS_SENT = Counter('apm_collector_payloads_sent_total', 'Total payloads sent to the ingestion endpoint')
PAYLOAD_FAILURES = Counter('apm_collector_failures_total', 'Failures swallowed by the collector', ['step'])
ERRORS_CAPTURED = Counter('apm_collector_errors_captured_total', 'Errors recorded by the collector hooks', ['source'])
SEND_TIME = Histogram('apm_collector_send_seconds', 'Time spent sending the payload')
