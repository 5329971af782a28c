# File: studyvault_app/modules/questions/__init__.py
from flask import Blueprint

blueprint = Blueprint('questions', __name__)
