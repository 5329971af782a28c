# File: studyvault_app/config.py
# Application configuration, read from the environment (.env supported).

import os

from dotenv import load_dotenv

load_dotenv()

# studyvault_app/ sits one level below the project root.
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

DATABASE_PATH = os.path.join(BASE_DIR, "database", "studyvault.db")


def _split_env_list(value):
    return tuple(part.strip() for part in value.split(',') if part.strip())


class Config:
    """Configuration for the StudyVault app."""

    # Sessions hold the study wizard state; set a real key outside development.
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'studyvault-dev-key'

    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'connect_args': {'timeout': 30},
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JSON API: forms are validated from request bodies, not rendered.
    WTF_CSRF_ENABLED = False

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')
    LOG_JSON = os.environ.get('LOG_JSON', '').lower() in ('1', 'true', 'yes')

    # Tag names offered as "question types" in the study wizard.
    QUESTION_TYPE_TAGS = _split_env_list(
        os.environ.get(
            'QUESTION_TYPE_TAGS',
            'Problem Solving,Multiple Choice,True/False,Short Answer,Essay,Coding',
        )
    )

    # Longest shuffled study queue kept in the session.
    STUDY_MAX_QUEUE = int(os.environ.get('STUDY_MAX_QUEUE', 200))

    @classmethod
    def init_app(cls, app):
        """Create the directories the app writes to."""
        uri = app.config.get('SQLALCHEMY_DATABASE_URI', '')
        if uri == f'sqlite:///{DATABASE_PATH}':
            os.makedirs(os.path.dirname(DATABASE_PATH), exist_ok=True)
        if app.config.get('LOG_DIR'):
            os.makedirs(app.config['LOG_DIR'], exist_ok=True)
