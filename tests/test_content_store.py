from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from studyvault_app.core.error_handlers import NotFoundError, StoreError
from studyvault_app.models import Question, QuestionTag, db
from studyvault_app.services.content_store import ContentStore


def test_create_stamps_timestamps_and_defaults(store):
    course = store.create('courses', {'title': 'Algorithms'})

    assert course.id is not None
    assert course.created_at is not None
    assert course.updated_at is not None
    assert course.color == '#4f46e5'
    assert course.topics == ()

    question = store.create('questions', {'course_id': course.id, 'content': 'What is a heap?'})
    assert question.difficulty == 'medium'
    assert question.type == 'problem_solving'
    assert question.estimated_time == 15
    assert question.tag_ids == ()


def test_update_changes_fields_and_keeps_created_at(store):
    course = store.create('courses', {'title': 'Algorithms', 'topics': ['Sorting']})

    updated = store.update('courses', course.id, {'title': 'Algorithms II', 'topics': ['Sorting', 'Graphs']})

    assert updated.title == 'Algorithms II'
    assert updated.topics == ('Sorting', 'Graphs')
    assert updated.created_at == course.created_at
    assert updated.updated_at >= course.updated_at


def test_update_and_delete_missing_record_raise_not_found(store):
    with pytest.raises(NotFoundError):
        store.update('courses', 999, {'title': 'Nope'})
    with pytest.raises(NotFoundError):
        store.delete('tags', 999)


def test_question_tag_ids_are_deduplicated_and_replaced(store, seeded):
    updated = store.update('questions', seeded.quicksort.id, {
        'tag_ids': [seeded.review.id, seeded.review.id, seeded.coding.id],
    })
    # Existing links keep their position, new ids are appended.
    assert updated.tag_ids == (seeded.coding.id, seeded.review.id)

    cleared = store.update('questions', seeded.quicksort.id, {'tag_ids': []})
    assert cleared.tag_ids == ()


def test_tag_only_update_refreshes_updated_at(store, seeded):
    long_ago = datetime(2000, 1, 1)
    db.session.query(Question).filter_by(question_id=seeded.quicksort.id).update({'updated_at': long_ago})
    db.session.commit()

    updated = store.update('questions', seeded.quicksort.id, {'tag_ids': [seeded.review.id]})

    assert updated.tag_ids == (seeded.review.id,)
    assert updated.updated_at > long_ago


def test_list_where_equality_and_in_filters(store, seeded):
    medium = store.list_where('questions', course_id=seeded.algorithms.id, difficulty='medium')
    assert {q.id for q in medium} == {seeded.dijkstra.id, seeded.knapsack.id}

    topics = store.list_where('questions', topic=['Graph Algorithms', 'SQL'])
    assert {q.id for q in topics} == {seeded.dijkstra.id, seeded.joins.id}


def test_list_where_rejects_unknown_field(store):
    with pytest.raises(ValueError):
        store.list_where('questions', answer='42')


def test_questions_with_tag(store, seeded):
    tagged = store.questions_with_tag(seeded.coding.id)
    assert [q.id for q in tagged] == [seeded.quicksort.id, seeded.knapsack.id]


def test_deleting_tag_leaves_dangling_id_in_store_but_untags_cache(store, cache, seeded):
    store.delete('tags', seeded.coding.id)

    stored = store.get_by_id('questions', seeded.quicksort.id)
    assert seeded.coding.id in stored.tag_ids

    cached = cache.get_question(seeded.quicksort.id)
    assert seeded.coding.id not in cached.tag_ids
    assert cache.get_tag(seeded.coding.id) is None


def test_deleting_course_leaves_orphaned_questions(store, cache, seeded):
    store.delete('courses', seeded.databases.id)

    assert store.get_by_id('courses', seeded.databases.id) is None
    assert store.get_by_id('questions', seeded.joins.id) is not None
    assert cache.get_course(seeded.databases.id) is None
    assert cache.get_question(seeded.joins.id) is not None


def test_deleting_question_removes_its_tag_links(store, seeded):
    store.delete('questions', seeded.knapsack.id)

    links = db.session.query(QuestionTag).filter_by(question_id=seeded.knapsack.id).count()
    assert links == 0


def test_delete_all_questions(store, cache, seeded):
    deleted = store.delete_all_questions()

    assert deleted == 5
    assert store.list_all('questions') == []
    assert db.session.query(QuestionTag).count() == 0
    assert cache.questions == ()
    assert len(store.list_all('courses')) == 2


def test_delete_all_courses_also_deletes_questions(store, cache, seeded):
    courses, questions = store.delete_all_courses()

    assert (courses, questions) == (2, 5)
    assert store.list_all('courses') == []
    assert db.session.query(Question).count() == 0
    assert cache.courses == ()
    assert cache.questions == ()
    # Tags are untouched.
    assert len(cache.tags) == 3


def test_get_or_404_carries_redirect(store):
    with pytest.raises(NotFoundError) as excinfo:
        store.get_or_404('courses', 42, redirect='/courses')

    assert excinfo.value.status_code == 404
    assert excinfo.value.details['redirect'] == '/courses'


class _BrokenSession:
    def __init__(self):
        self.rolled_back = False

    def query(self, *_args, **_kwargs):
        raise OperationalError('SELECT 1', {}, Exception('database is locked'))

    def rollback(self):
        self.rolled_back = True


def test_database_errors_become_store_errors(app):
    session = _BrokenSession()
    broken = ContentStore(session=session)

    with pytest.raises(StoreError) as excinfo:
        broken.list_where('questions', difficulty='easy')

    assert excinfo.value.status_code == 503
    assert excinfo.value.details['operation'] == 'query_records'
    assert session.rolled_back is True
