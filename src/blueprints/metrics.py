"""
Prometheus metrics endpoint blueprint.

Exposes metrics for monitoring and alerting.
"""
from flask import Blueprint, Response
from src.monitoring import get_metrics

metrics_bp = Blueprint('metrics', __name__)


@metrics_bp.route('/metrics', methods=['GET'])
def prometheus_metrics():
    """
    Prometheus metrics endpoint.

    Returns Prometheus-formatted metrics:
    - guest_authorizations_total: Authorization attempts by result/mode
    - guest_authorization_duration_seconds: Authorization latency histogram
    - guest_authorization_errors_total: Errors by type
    - db_connection_pool_connections: Database connection pool status

    Returns:
        200 OK: Metrics in Prometheus exposition format
    """
    metrics_data, content_type = get_metrics()
    return Response(metrics_data, mimetype=content_type)
