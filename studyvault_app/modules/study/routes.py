# File: studyvault_app/modules/study/routes.py
# Study wizard endpoints. Each action loads the controller from the session,
# applies one change, saves it back and returns the current view.

from flask import url_for

from ...core.error_handlers import NotFoundError, error_response, success_response
from ...services.content_cache import get_content_cache
from ...utils.forms import request_payload
from .engine import StudySessionController
from . import blueprint


def _respond(controller, message=None):
    controller.save()
    return success_response(data=controller.to_view(), message=message)


def _payload_list(payload, key):
    value = payload.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(',') if item.strip()]
    return list(value)


@blueprint.route('', methods=['GET'])
def study_home():
    return _respond(StudySessionController.load())


@blueprint.route('/<int:course_id>', methods=['GET'])
def study_course(course_id):
    """Open the wizard with ``course_id`` preselected."""
    if get_content_cache().get_course(course_id) is None:
        raise NotFoundError(
            f"Course {course_id} not found",
            resource='courses',
            redirect=url_for('study.study_home'),
        )
    controller = StudySessionController.load()
    if controller.course_id != course_id:
        controller.restart()
        controller.select_course(course_id)
    return _respond(controller)


@blueprint.route('/course', methods=['POST'])
def select_course():
    controller = StudySessionController.load()
    controller.select_course(request_payload().get('course_id'))
    return _respond(controller)


@blueprint.route('/topics', methods=['POST'])
def select_topics():
    payload = request_payload()
    controller = StudySessionController.load()
    if 'toggle' in payload:
        controller.toggle_topic(payload['toggle'])
    else:
        controller.set_topics(_payload_list(payload, 'topics'))
    return _respond(controller)


@blueprint.route('/question-types', methods=['POST'])
def select_question_types():
    payload = request_payload()
    controller = StudySessionController.load()
    if 'toggle' in payload:
        controller.toggle_question_type(payload['toggle'])
    else:
        controller.set_question_types(_payload_list(payload, 'question_types'))
    return _respond(controller)


@blueprint.route('/difficulty', methods=['POST'])
def select_difficulty():
    controller = StudySessionController.load()
    controller.set_difficulty(request_payload().get('difficulty'))
    return _respond(controller)


@blueprint.route('/advance', methods=['POST'])
def advance():
    controller = StudySessionController.load()
    try:
        started = controller.advance()
    finally:
        controller.save()
    if not started:
        return error_response(
            controller.error or "Could not load questions",
            code='STUDY_START_FAILED',
            status_code=503,
            details={'session': controller.to_view()},
        )
    return _respond(controller)


@blueprint.route('/back', methods=['POST'])
def back():
    controller = StudySessionController.load()
    controller.back()
    return _respond(controller)


@blueprint.route('/restart', methods=['POST'])
def restart():
    controller = StudySessionController.load()
    controller.restart()
    return _respond(controller)


@blueprint.route('/next', methods=['POST'])
def next_question():
    controller = StudySessionController.load()
    controller.next()
    return _respond(controller)


@blueprint.route('/previous', methods=['POST'])
def previous_question():
    controller = StudySessionController.load()
    controller.previous()
    return _respond(controller)


@blueprint.route('/toggle-answer', methods=['POST'])
def toggle_answer():
    controller = StudySessionController.load()
    controller.toggle_answer()
    return _respond(controller)


@blueprint.route('/answer', methods=['POST'])
def user_answer():
    controller = StudySessionController.load()
    controller.set_user_answer(request_payload().get('answer'))
    return _respond(controller)
