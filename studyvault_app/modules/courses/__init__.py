# File: studyvault_app/modules/courses/__init__.py
from flask import Blueprint

blueprint = Blueprint('courses', __name__)
