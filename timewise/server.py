import logging

from flask import Flask, jsonify, request

from .config import Config
from .errors import ValidationError
from .models import ALL_CATEGORIES

logger = logging.getLogger(__name__)

app = Flask(__name__)
# Keep key order of report payloads as built
app.json.sort_keys = False

# These will be set by TimewiseServer
current_store = None
coordinator = None
renderer = None


# Enable CORS for all routes so a locally opened dashboard page can call us
@app.after_request
def add_cors_headers(response):
    response.headers['Access-Control-Allow-Origin'] = '*'
    response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
    response.headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, DELETE, OPTIONS'
    return response


def _not_ready():
    return jsonify({'success': False, 'error': 'Server not initialized'}), 503


def _json_body():
    """Request JSON as a dict, or None when the body is not a JSON object."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def _bad_body():
    return jsonify({'success': False, 'error': 'Request body must be a JSON object'}), 400


@app.route('/')
@app.route('/api/health')
def health():
    return jsonify({
        'status': 'ok',
        'activities': len(current_store.get_data()) if current_store else 0,
    })


@app.route('/api/activities', methods=['GET'])
def list_activities():
    if current_store is None:
        return _not_ready()
    category = request.args.get('category', ALL_CATEGORIES)
    activities = current_store.list_activities(category)
    return jsonify({'activities': [a.to_dict() for a in activities]})


@app.route('/api/activities', methods=['POST'])
def create_activity():
    if current_store is None:
        return _not_ready()
    data = _json_body()
    if data is None:
        return _bad_body()
    try:
        record = current_store.create(data)
    except ValidationError as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except Exception as e:
        logger.exception("Error creating activity")
        return jsonify({'success': False, 'error': str(e)}), 500

    if record is None:
        return jsonify({'success': False, 'error': 'Error saving activity. Please try again.'}), 500
    return jsonify({
        'success': True,
        'message': 'Activity added successfully! 🎉',
        'activity': record.to_dict(),
    }), 201


@app.route('/api/activities/<int:activity_id>', methods=['PUT'])
def update_activity(activity_id):
    if current_store is None:
        return _not_ready()
    if current_store.get(activity_id) is None:
        return jsonify({'success': False, 'error': 'Activity not found'}), 404

    data = _json_body()
    if data is None:
        return _bad_body()
    try:
        ok = current_store.update_by_id(activity_id, data)
    except ValidationError as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except Exception as e:
        logger.exception("Error updating activity")
        return jsonify({'success': False, 'error': str(e)}), 500

    if not ok:
        return jsonify({'success': False, 'error': 'Error saving activity. Please try again.'}), 500
    return jsonify({'success': True, 'activity': current_store.get(activity_id).to_dict()})


@app.route('/api/activities/<int:activity_id>', methods=['DELETE'])
def delete_activity(activity_id):
    if current_store is None:
        return _not_ready()
    if current_store.get(activity_id) is None:
        return jsonify({'success': False, 'error': 'Activity not found'}), 404
    if not current_store.delete_by_id(activity_id):
        return jsonify({'success': False, 'error': 'Error deleting activity. Please try again.'}), 500
    return jsonify({'success': True, 'deleted': activity_id})


@app.route('/api/clear', methods=['POST'])
def clear_activities():
    if current_store is None:
        return _not_ready()
    if not current_store.clear():
        return jsonify({'success': False, 'error': 'Error clearing activities. Please try again.'}), 500
    return jsonify({'success': True, 'message': 'All activities have been cleared!'})


@app.route('/api/report')
def get_report():
    if coordinator is None:
        return _not_ready()
    try:
        window = request.args.get('window')
        return jsonify(coordinator.refresh(window))
    except Exception as e:
        logger.exception("Error building report")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/stats')
def get_stats():
    if coordinator is None:
        return _not_ready()
    try:
        report = coordinator.refresh()
        return jsonify(report['stats'])
    except Exception as e:
        logger.exception("Error building stats")
        return jsonify({'success': False, 'error': str(e)}), 500


@app.route('/api/charts')
def get_charts():
    if coordinator is None:
        return _not_ready()
    series = getattr(renderer, 'series', None)
    if series is None:
        # Nothing rendered yet this session
        series = coordinator.refresh()['series']
    return jsonify({'window': coordinator.window, 'series': series})


@app.route('/api/suggestions')
def get_suggestions():
    if coordinator is None:
        return _not_ready()
    try:
        return jsonify({'suggestions': coordinator.suggestions()})
    except Exception as e:
        logger.exception("Error generating suggestions")
        return jsonify({'success': False, 'error': str(e)}), 500


class TimewiseServer:
    def __init__(self, store, report_coordinator, chart_renderer=None, host=None, port=None):
        global current_store, coordinator, renderer
        self.app = app
        self.store = store
        self.coordinator = report_coordinator
        self.host = host or Config.HOST
        self.port = port or Config.PORT

        # Set globals
        current_store = store
        coordinator = report_coordinator
        renderer = chart_renderer if chart_renderer is not None else report_coordinator.renderer

    def run(self):
        logger.info(f"Serving Timewise API on http://{self.host}:{self.port}")
        self.app.run(host=self.host, port=self.port, debug=False, use_reloader=False)
