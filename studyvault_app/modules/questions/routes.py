# File: studyvault_app/modules/questions/routes.py
# Question CRUD plus the filtered and course-scoped question lists.

from flask import current_app, request, url_for

from ...core.defaults import (
    DEFAULT_DIFFICULTY,
    DEFAULT_ESTIMATED_TIME,
    DEFAULT_QUESTION_TYPE,
    DIFFICULTIES,
    QUESTION_TYPES,
)
from ...core.error_handlers import NotFoundError, success_response
from ...services.content_cache import get_content_cache
from ...services.content_store import ContentStore
from ...utils.forms import bind_form, request_payload
from .forms import QuestionForm
from .logics import FilterSpec, resolve_questions
from . import blueprint


def _course_summary(course):
    if course is None:
        return None
    return {'id': course.id, 'title': course.title, 'color': course.color}


def _question_payload(question, courses, tags, include_answer=True):
    """Question dict with its course summary and resolvable tags.

    Tag ids pointing at deleted tags are left out of ``tag_details``.
    """
    data = question.to_dict(include_answer=include_answer)
    data['course'] = _course_summary(courses.get(question.course_id))
    data['tag_details'] = [tags[tag_id].to_dict() for tag_id in question.tag_ids if tag_id in tags]
    return data


def _render_list(questions, cache):
    courses = cache.course_index()
    tags = cache.tag_index()
    return [_question_payload(question, courses, tags) for question in questions]


def _find_question(question_id):
    question = get_content_cache().get_question(question_id)
    if question is None:
        question = ContentStore().get_or_404(
            'questions', question_id, redirect=url_for('questions.list_questions')
        )
    return question


@blueprint.route('', methods=['GET'])
def list_questions():
    """Filtered list. Query args: course_id, topic, difficulty, tags (comma list)."""
    raw_tags = request.args.get('tags', '')
    spec = FilterSpec.build(
        course_id=request.args.get('course_id', type=int),
        topics=request.args.get('topic'),
        difficulty=request.args.get('difficulty'),
        tag_ids=[tag for tag in raw_tags.split(',') if tag.strip().isdigit()],
    )
    cache = get_content_cache()
    questions = resolve_questions(spec, cache, ContentStore())
    return success_response(data=_render_list(questions, cache))


@blueprint.route('/course/<int:course_id>', methods=['GET'])
def list_course_questions(course_id):
    cache = get_content_cache()
    course = cache.get_course(course_id)
    if course is None:
        raise NotFoundError(
            f"Course {course_id} not found",
            resource='courses',
            redirect=url_for('questions.list_questions'),
        )
    questions = resolve_questions(FilterSpec.build(course_id=course_id), cache, ContentStore())
    return success_response(data={
        'course': course.to_dict(),
        'questions': _render_list(questions, cache),
    })


@blueprint.route('', methods=['POST'])
def create_question():
    form = bind_form(QuestionForm, request_payload())
    question = ContentStore().create('questions', form.to_record())
    return success_response(data=question.to_dict(), message="Question created"), 201


@blueprint.route('/<int:question_id>', methods=['GET'])
@blueprint.route('/edit/<int:question_id>', methods=['GET'])
def get_question(question_id):
    cache = get_content_cache()
    question = _find_question(question_id)
    return success_response(data=_question_payload(question, cache.course_index(), cache.tag_index()))


@blueprint.route('/<int:question_id>', methods=['PUT'])
@blueprint.route('/edit/<int:question_id>', methods=['PUT', 'POST'])
def update_question(question_id):
    existing = _find_question(question_id)
    form = bind_form(QuestionForm, {**existing.to_form_data(), **request_payload()})
    question = ContentStore().update('questions', question_id, form.to_record())
    return success_response(data=question.to_dict(), message="Question updated")


@blueprint.route('/<int:question_id>', methods=['DELETE'])
def delete_question(question_id):
    _find_question(question_id)
    ContentStore().delete('questions', question_id)
    current_app.logger.info("Question %s deleted", question_id)
    return success_response(data={'id': question_id}, message="Question deleted")


@blueprint.route('/new', methods=['GET'])
def new_question():
    """Defaults and choices for an empty question form; ``?course_id=`` preselects."""
    cache = get_content_cache()
    course = cache.get_course(request.args.get('course_id', type=int))
    return success_response(data={
        'defaults': {
            'course_id': course.id if course else None,
            'difficulty': DEFAULT_DIFFICULTY,
            'type': DEFAULT_QUESTION_TYPE,
            'estimated_time': DEFAULT_ESTIMATED_TIME,
            'tags': [],
        },
        'courses': [
            {'id': c.id, 'title': c.title, 'topics': list(c.topics)} for c in cache.courses
        ],
        'difficulties': list(DIFFICULTIES),
        'question_types': [{'value': value, 'label': label} for value, label in QUESTION_TYPES],
        'tags': [tag.to_dict() for tag in cache.tags],
    })
