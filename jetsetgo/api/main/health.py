from flask import jsonify

from jetsetgo.services.amadeus import is_configured
from jetsetgo.api.main import main_bp


@main_bp.route('/health', methods=['GET'])
def health():
    """Liveness check; also reports whether flight search credentials are set"""
    return jsonify({
        'status': 'ok',
        'message': 'JetSetGo API is running',
        'amadeus': 'configured' if is_configured() else 'missing'
    }), 200
