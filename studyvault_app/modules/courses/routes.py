# File: studyvault_app/modules/courses/routes.py
# Course CRUD. Reads come from the content cache, writes go through the store.

from flask import current_app, url_for

from ...core.defaults import COLOR_PALETTE, DEFAULT_COLOR
from ...core.error_handlers import success_response
from ...services.content_cache import get_content_cache
from ...services.content_store import ContentStore
from ...utils.forms import bind_form, request_payload
from .forms import CourseForm
from . import blueprint


def _course_payload(course, cache):
    data = course.to_dict()
    data['question_count'] = sum(1 for q in cache.questions if q.course_id == course.id)
    return data


def _find_course(course_id):
    """Cached course, else the store; missing sends the client back to the list."""
    course = get_content_cache().get_course(course_id)
    if course is None:
        course = ContentStore().get_or_404(
            'courses', course_id, redirect=url_for('courses.list_courses')
        )
    return course


@blueprint.route('', methods=['GET'])
def list_courses():
    cache = get_content_cache()
    return success_response(data=[_course_payload(course, cache) for course in cache.courses])


@blueprint.route('', methods=['POST'])
def create_course():
    form = bind_form(CourseForm, request_payload())
    course = ContentStore().create('courses', form.to_record())
    return success_response(data=course.to_dict(), message="Course created"), 201


@blueprint.route('/<int:course_id>', methods=['GET'])
@blueprint.route('/edit/<int:course_id>', methods=['GET'])
def get_course(course_id):
    course = _find_course(course_id)
    return success_response(data=_course_payload(course, get_content_cache()))


@blueprint.route('/<int:course_id>', methods=['PUT'])
@blueprint.route('/edit/<int:course_id>', methods=['PUT', 'POST'])
def update_course(course_id):
    existing = _find_course(course_id)
    form = bind_form(CourseForm, {**existing.to_form_data(), **request_payload()})
    course = ContentStore().update('courses', course_id, form.to_record())
    return success_response(data=course.to_dict(), message="Course updated")


@blueprint.route('/<int:course_id>', methods=['DELETE'])
def delete_course(course_id):
    _find_course(course_id)
    ContentStore().delete('courses', course_id)
    # Questions are left in place; course-scoped views skip them from now on.
    orphaned = sum(1 for q in get_content_cache().questions if q.course_id == course_id)
    if orphaned:
        current_app.logger.info("Course %s deleted, %d question(s) left orphaned", course_id, orphaned)
    return success_response(
        data={'id': course_id, 'orphaned_questions': orphaned},
        message="Course deleted",
    )


@blueprint.route('/new', methods=['GET'])
def new_course():
    """Defaults and choices for an empty course form."""
    return success_response(data={
        'defaults': {'color': DEFAULT_COLOR, 'topics': []},
        'palette': [{'value': value, 'label': label} for value, label in COLOR_PALETTE],
    })
