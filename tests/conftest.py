import os
import sys
from types import SimpleNamespace

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from studyvault_app import create_app, db
from studyvault_app.config import Config
from studyvault_app.services.content_cache import get_content_cache
from studyvault_app.services.content_store import ContentStore


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    WTF_CSRF_ENABLED = False
    LOG_DIR = None


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return ContentStore()


@pytest.fixture
def cache(app):
    return get_content_cache(app)


@pytest.fixture
def seeded(store):
    """Two courses, three tags and five questions."""
    algorithms = store.create('courses', {
        'title': 'Algorithms',
        'topics': ['Sorting Algorithms', 'Graph Algorithms', 'Dynamic Programming'],
    })
    databases = store.create('courses', {'title': 'Databases', 'topics': ['SQL']})

    multiple_choice = store.create('tags', {'name': 'Multiple Choice', 'color': '#16a34a'})
    coding = store.create('tags', {'name': 'Coding', 'color': '#f59e0b'})
    review = store.create('tags', {'name': 'Review', 'color': '#1e293b'})

    def question(course, content, topic, difficulty, tags):
        return store.create('questions', {
            'course_id': course.id,
            'content': content,
            'answer': f"Answer to {content}",
            'topic': topic,
            'difficulty': difficulty,
            'tag_ids': [tag.id for tag in tags],
        })

    return SimpleNamespace(
        algorithms=algorithms,
        databases=databases,
        multiple_choice=multiple_choice,
        coding=coding,
        review=review,
        quicksort=question(algorithms, 'Implement quicksort', 'Sorting Algorithms', 'easy', [coding]),
        merge_sort=question(algorithms, 'Is merge sort stable?', 'Sorting Algorithms', 'hard', [multiple_choice]),
        dijkstra=question(algorithms, 'Explain Dijkstra', 'Graph Algorithms', 'medium', []),
        knapsack=question(algorithms, 'Solve 0/1 knapsack', 'Dynamic Programming', 'medium', [coding, review]),
        joins=question(databases, 'Which join keeps unmatched rows?', 'SQL', 'easy', [multiple_choice]),
    )
