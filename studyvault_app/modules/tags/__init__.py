# File: studyvault_app/modules/tags/__init__.py
from flask import Blueprint

blueprint = Blueprint('tags', __name__)
