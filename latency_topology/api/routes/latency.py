"""Latency query API routes

Exposes the sample store to the dashboard: pair history, pair statistics,
recent samples across all pairs and the server catalog. Parameter
validation happens here; the store itself accepts any identifiers.
"""
from flask import Blueprint, current_app, jsonify, request
import logging
from typing import Optional, Tuple

from latency_topology.api.errors import InvalidRequest, MissingParameter, handle_api_errors
from latency_topology.config.base_config import RECENT_LIMIT, current_config
from latency_topology.models.models import TimeRange
from latency_topology.monitoring.metrics import track_request

logger = logging.getLogger(__name__)

# Create Blueprint for latency API routes
latency_api = Blueprint('latency_api', __name__)

EXTENSION_KEY = 'latency_topology'


def get_context():
    """Get the store/generator/servers bundle registered on the app."""
    return current_app.extensions[EXTENSION_KEY]


def parse_int_param(name: str) -> Optional[int]:
    """Parse an optional integer query parameter; empty counts as absent."""
    value = request.args.get(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise InvalidRequest(f"{name} must be an integer")


def parse_pair_query(store) -> Tuple[str, str, Optional[int], Optional[int]]:
    """Read from/to ids and the optional time window from the request."""
    from_id = request.args.get('from')
    to_id = request.args.get('to')
    if not from_id or not to_id:
        raise MissingParameter()

    from_time = parse_int_param('fromTime')
    to_time = parse_int_param('toTime')

    range_name = request.args.get('range')
    if range_name and from_time is None:
        try:
            time_range = TimeRange(range_name)
        except ValueError:
            raise InvalidRequest(f"Unknown range: {range_name}")
        from_time = store.clock() - time_range.to_millis()

    return from_id, to_id, from_time, to_time


@latency_api.route('/api/latency/history', methods=['GET'])
@handle_api_errors
@track_request('history')
def get_history():
    """Query historical latency samples for a pair."""
    store = get_context()['store']
    from_id, to_id, from_time, to_time = parse_pair_query(store)
    samples = store.query(from_id, to_id, from_time, to_time)
    return jsonify([sample.to_dict() for sample in samples])


@latency_api.route('/api/latency/stats', methods=['GET'])
@handle_api_errors
@track_request('stats')
def get_stats():
    """Get statistics for a pair."""
    store = get_context()['store']
    from_id, to_id, from_time, to_time = parse_pair_query(store)
    samples = store.query(from_id, to_id, from_time, to_time)
    return jsonify(store.compute_stats(samples).to_dict())


@latency_api.route('/api/latency/recent', methods=['GET'])
@handle_api_errors
@track_request('recent')
def get_recent():
    """Get recent latency samples for dashboard display."""
    limit = parse_int_param('limit')
    if limit is None:
        limit = RECENT_LIMIT
    elif limit < 0:
        raise InvalidRequest("limit must not be negative")

    samples = get_context()['store'].recent_across_all_pairs(limit)
    return jsonify([sample.to_dict() for sample in samples])


@latency_api.route('/api/servers', methods=['GET'])
@handle_api_errors
def list_servers():
    """List exchange servers shown on the map."""
    return jsonify([server.to_dict() for server in get_context()['servers']])


@latency_api.route('/api/config', methods=['GET'])
def get_config():
    """Get the effective service configuration."""
    return jsonify(current_config)
