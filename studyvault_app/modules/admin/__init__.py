# File: studyvault_app/modules/admin/__init__.py
from flask import Blueprint

blueprint = Blueprint('admin', __name__)
