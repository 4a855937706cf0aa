"""
CMS API: public reads of published pages, editor/admin writes
"""
from flask import Blueprint

cms_bp = Blueprint('cms', __name__, url_prefix='/api/cms')

from . import public, admin
