import pytest

from studyvault_app.core.error_handlers import StoreError, ValidationError
from studyvault_app.modules.study.engine import StudySessionController, StudyStep


def _studying(cache, seeded, resolver=None):
    controller = StudySessionController(cache=cache)
    controller.select_course(seeded.algorithms.id)
    controller.advance()
    controller.advance()
    controller.advance(resolver)
    return controller


def test_advance_requires_course(cache, seeded):
    controller = StudySessionController(cache=cache)

    with pytest.raises(ValidationError):
        controller.advance()
    assert controller.step == StudyStep.SELECT_COURSE


def test_select_unknown_course_is_rejected(cache, seeded):
    controller = StudySessionController(cache=cache)

    with pytest.raises(ValidationError):
        controller.select_course(999)
    assert controller.course_id is None


def test_changing_course_clears_topics(cache, seeded):
    controller = StudySessionController(cache=cache)
    controller.select_course(seeded.algorithms.id)
    controller.toggle_topic('Sorting Algorithms')

    controller.select_course(seeded.algorithms.id)
    assert controller.topics == ['Sorting Algorithms']

    controller.select_course(seeded.databases.id)
    assert controller.topics == []


def test_topic_options_are_the_course_topics(cache, seeded):
    controller = StudySessionController(cache=cache)
    controller.select_course(seeded.algorithms.id)

    assert controller.topic_options() == ['Sorting Algorithms', 'Graph Algorithms', 'Dynamic Programming']
    with pytest.raises(ValidationError):
        controller.toggle_topic('SQL')

    controller.toggle_topic('Graph Algorithms')
    controller.toggle_topic('Graph Algorithms')
    assert controller.topics == []


def test_question_type_options_follow_allow_list(cache, seeded):
    controller = StudySessionController(cache=cache)

    names = [tag.name for tag in controller.question_type_options()]
    assert names == ['Multiple Choice', 'Coding']

    controller.set_question_types([seeded.coding.id, str(seeded.coding.id)])
    assert controller.question_type_ids == [seeded.coding.id]
    with pytest.raises(ValidationError):
        controller.toggle_question_type(seeded.review.id)


def test_invalid_difficulty_is_rejected(cache, seeded):
    controller = StudySessionController(cache=cache)
    with pytest.raises(ValidationError):
        controller.set_difficulty('impossible')
    controller.set_difficulty('hard')
    assert controller.difficulty == 'hard'


def test_back_keeps_selections(cache, seeded):
    controller = StudySessionController(cache=cache)
    controller.select_course(seeded.algorithms.id)
    controller.advance()
    controller.set_topics(['Sorting Algorithms'])
    controller.advance()

    controller.back()
    controller.back()

    assert controller.step == StudyStep.SELECT_COURSE
    assert controller.course_id == seeded.algorithms.id
    assert controller.topics == ['Sorting Algorithms']


def test_start_studying_shuffles_a_permutation(cache, seeded):
    controller = _studying(cache, seeded)

    assert controller.step == StudyStep.STUDYING
    assert controller.cursor == 0
    assert sorted(controller.queue) == sorted(
        [seeded.quicksort.id, seeded.merge_sort.id, seeded.dijkstra.id, seeded.knapsack.id]
    )
    assert len(controller.queue) == len(set(controller.queue))


def test_selected_topic_and_type_reach_the_filter(cache, seeded):
    controller = StudySessionController(cache=cache)
    controller.select_course(seeded.algorithms.id)
    controller.set_topics(['Sorting Algorithms', 'Dynamic Programming'])
    controller.set_question_types([seeded.coding.id])

    controller.start_studying()

    assert sorted(controller.queue) == sorted([seeded.quicksort.id, seeded.knapsack.id])


def test_cursor_is_clamped_and_moves_reset_answer(cache, seeded):
    controller = _studying(cache, seeded)

    assert controller.previous() is False
    assert controller.cursor == 0

    controller.toggle_answer()
    controller.set_user_answer('draft')
    assert controller.next() is True
    assert controller.cursor == 1
    assert controller.answer_visible is False
    assert controller.user_answer == ''

    for _ in range(10):
        controller.next()
    assert controller.cursor == controller.count - 1

    controller.toggle_answer()
    assert controller.next() is False
    assert controller.cursor == controller.count - 1
    assert controller.answer_visible is True


def test_toggle_answer_has_no_other_effect(cache, seeded):
    controller = _studying(cache, seeded)
    controller.set_user_answer('my answer')

    controller.toggle_answer()

    assert controller.answer_visible is True
    assert controller.cursor == 0
    assert controller.user_answer == 'my answer'


def test_answer_only_in_view_when_visible(cache, seeded):
    controller = _studying(cache, seeded)

    assert 'answer' not in controller.to_view()['question']
    controller.toggle_answer()
    assert controller.to_view()['question']['answer'].startswith('Answer to')


def test_empty_result_enters_empty_state(cache, seeded):
    controller = _studying(cache, seeded, resolver=lambda spec: [])

    assert controller.step == StudyStep.EMPTY
    assert controller.queue == []
    assert controller.current_question() is None
    assert controller.next() is False
    assert controller.to_view()['is_empty'] is True


def test_filter_failure_stays_on_question_types(app, cache, seeded):
    def failing(spec):
        raise StoreError("Failed to query records.", operation='query_records')

    controller = _studying(cache, seeded, resolver=failing)

    assert controller.step == StudyStep.SELECT_QUESTION_TYPES
    assert controller.error == "Failed to query records."
    assert controller.queue == []


def test_restart_clears_selections(cache, seeded):
    controller = StudySessionController(cache=cache)
    controller.select_course(seeded.algorithms.id)
    controller.set_topics(['Sorting Algorithms'])
    controller.set_question_types([seeded.multiple_choice.id])
    controller.set_difficulty('hard')
    controller.start_studying()
    assert controller.step == StudyStep.STUDYING

    controller.restart()

    assert controller.step == StudyStep.SELECT_COURSE
    assert controller.topics == []
    assert controller.question_type_ids == []
    assert controller.difficulty == 'all'
    assert controller.queue == []
    assert controller.cursor == 0


def test_round_trips_through_flask_session(app, cache, seeded):
    with app.test_request_context():
        controller = _studying(cache, seeded)
        controller.next()
        controller.save()

        restored = StudySessionController.load(cache=cache)

    assert restored.to_dict() == controller.to_dict()
    assert restored.step == StudyStep.STUDYING
    assert restored.current_question().id == controller.queue[1]


def test_deleted_course_does_not_start_a_session(app, store, cache, seeded):
    controller = StudySessionController(cache=cache)
    controller.select_course(seeded.algorithms.id)
    controller.advance()
    controller.advance()

    store.delete('courses', seeded.algorithms.id)

    with pytest.raises(ValidationError):
        controller.advance()
    assert controller.step == StudyStep.SELECT_COURSE
    assert controller.course_id is None
    assert controller.queue == []
    assert controller.error == "Selected course no longer exists"


def test_changing_course_while_studying_drops_the_queue(cache, seeded):
    controller = _studying(cache, seeded)
    controller.next()
    controller.toggle_answer()

    controller.select_course(seeded.databases.id)

    assert controller.step == StudyStep.SELECT_TOPICS
    assert controller.queue == []
    assert controller.cursor == 0
    assert controller.answer_visible is False
    assert controller.to_view()['course']['title'] == 'Databases'


def test_reselecting_same_course_keeps_the_queue(cache, seeded):
    controller = _studying(cache, seeded)
    queue = list(controller.queue)

    controller.select_course(seeded.algorithms.id)

    assert controller.step == StudyStep.STUDYING
    assert controller.queue == queue


def test_queue_is_capped(app, cache, seeded):
    app.config['STUDY_MAX_QUEUE'] = 2

    controller = _studying(cache, seeded)

    assert controller.step == StudyStep.STUDYING
    assert controller.count == 2
    algorithm_ids = {seeded.quicksort.id, seeded.merge_sort.id, seeded.dijkstra.id, seeded.knapsack.id}
    assert set(controller.queue) <= algorithm_ids
