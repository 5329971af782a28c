# File: studyvault_app/modules/dashboard/routes.py

from ...core.error_handlers import success_response
from ...services.content_cache import get_content_cache
from . import blueprint

RECENT_COURSE_LIMIT = 5


@blueprint.route('/', methods=['GET'])
@blueprint.route('/dashboard', methods=['GET'])
def dashboard():
    """Counts plus the first few courses."""
    cache = get_content_cache()
    courses = cache.courses
    return success_response(data={
        'course_count': len(courses),
        'question_count': len(cache.questions),
        'tag_count': len(cache.tags),
        'courses': [course.to_dict() for course in courses[:RECENT_COURSE_LIMIT]],
        'has_more_courses': len(courses) > RECENT_COURSE_LIMIT,
    })
