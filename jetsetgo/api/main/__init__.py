"""
Health check and feedback endpoints
"""
from flask import Blueprint

main_bp = Blueprint('main', __name__, url_prefix='/api')

from jetsetgo.api.main import health, feedback

__all__ = ['main_bp']
