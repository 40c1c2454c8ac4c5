from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

cache_hits_total = Counter('cache_hits_total', 'Total cache hits')
cache_misses_total = Counter('cache_misses_total', 'Total cache misses')

store_errors_total = Counter('store_errors_total', 'Failed document store operations', ['operation'])
payment_intents_total = Counter('payment_intents_total', 'Payment intents requested', ['outcome'])
auth_denials_total = Counter('auth_denials_total', 'Requests rejected by authorization', ['reason'])

def metrics_endpoint():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

def endpoint_label(request) -> str:
    """Route template such as ``/flags/single/{name}``; keeps label cardinality bounded."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"
