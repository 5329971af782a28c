# File: studyvault_app/modules/study/__init__.py
from flask import Blueprint

blueprint = Blueprint('study', __name__)
