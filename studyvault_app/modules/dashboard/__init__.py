# File: studyvault_app/modules/dashboard/__init__.py
from flask import Blueprint

blueprint = Blueprint('dashboard', __name__)
