from studyvault_app.schemas import CourseDTO, QuestionDTO, TagDTO
from studyvault_app.services.content_cache import ContentCache


def _question(question_id, **overrides):
    fields = dict(
        id=question_id,
        course_id=1,
        title=None,
        content=f"Question {question_id}",
        answer=None,
        difficulty='medium',
        type='problem_solving',
        topic=None,
    )
    fields.update(overrides)
    return QuestionDTO(**fields)


def test_load_reads_all_collections(store, seeded):
    cache = ContentCache()
    assert cache.is_loaded is False

    cache.load(store)

    assert cache.is_loaded is True
    assert [c.title for c in cache.courses] == ['Algorithms', 'Databases']
    assert len(cache.questions) == 5
    assert len(cache.tags) == 3


def test_store_writes_keep_app_cache_in_step(store, cache):
    course = store.create('courses', {'title': 'Networks'})
    assert cache.get_course(course.id) == course

    renamed = store.update('courses', course.id, {'title': 'Computer Networks'})
    assert cache.get_course(course.id).title == 'Computer Networks'
    assert cache.courses == (renamed,)

    store.delete('courses', course.id)
    assert cache.courses == ()


def test_writes_replace_whole_collection():
    cache = ContentCache()
    cache.replace_questions([_question(1), _question(2)])
    before = cache.questions

    cache.upsert('questions', _question(2, difficulty='hard'))

    # The tuple a reader already holds is never mutated.
    assert before[1].difficulty == 'medium'
    assert cache.questions is not before
    assert cache.get_question(2).difficulty == 'hard'


def test_merge_questions_is_additive_and_dedupes():
    cache = ContentCache()
    cache.replace_questions([_question(1), _question(2)])

    added = cache.merge_questions([_question(2, topic='Graphs'), _question(3)])

    assert added == 1
    assert [q.id for q in cache.questions] == [1, 2, 3]
    assert cache.get_question(2).topic == 'Graphs'


def test_merge_nothing_keeps_cache():
    cache = ContentCache()
    cache.replace_questions([_question(1)])

    assert cache.merge_questions([]) == 0
    assert [q.id for q in cache.questions] == [1]


def test_untag_questions_only_touches_tagged_questions():
    cache = ContentCache()
    untouched = _question(2, tag_ids=(7,))
    cache.replace_questions([_question(1, tag_ids=(5, 7)), untouched])

    cache.untag_questions(5)

    assert cache.get_question(1).tag_ids == (7,)
    assert cache.get_question(2) is untouched


def test_lookups_tolerate_missing_and_string_ids():
    cache = ContentCache()
    cache.replace_courses([CourseDTO(id=1, title='Algorithms', description=None, color='#4f46e5')])
    cache.replace_tags([TagDTO(id=4, name='Coding', color='#f59e0b')])

    assert cache.get_course('1').title == 'Algorithms'
    assert cache.get_course(None) is None
    assert cache.get_course('abc') is None
    assert cache.get_tag(99) is None
    assert cache.tag_index() == {4: cache.get_tag(4)}


def test_clear_selected_collections():
    cache = ContentCache()
    cache.replace_courses([CourseDTO(id=1, title='Algorithms', description=None, color='#4f46e5')])
    cache.replace_questions([_question(1)])

    cache.clear('questions')

    assert cache.questions == ()
    assert len(cache.courses) == 1


def test_display_title_falls_back_to_content():
    long_content = 'x' * 80
    assert _question(1, content=long_content).display_title == 'x' * 50
    assert _question(1, title='Heaps').display_title == 'Heaps'


def test_tag_text_color_contrasts_with_background():
    assert TagDTO(id=1, name='Light', color='#f59e0b').text_color == '#000000'
    assert TagDTO(id=2, name='Dark', color='#1e293b').text_color == '#ffffff'
