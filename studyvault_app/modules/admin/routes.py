# File: studyvault_app/modules/admin/routes.py
# Bulk maintenance actions. Each runs as one store transaction.

from flask import current_app

from ...core.error_handlers import success_response
from ...services.content_store import ContentStore
from . import blueprint


@blueprint.route('/questions/delete-all', methods=['POST'])
def delete_all_questions():
    deleted = ContentStore().delete_all_questions()
    current_app.logger.warning("Admin: deleted all %d question(s)", deleted)
    return success_response(data={'deleted_questions': deleted}, message="All questions deleted")


@blueprint.route('/courses/delete-all', methods=['POST'])
def delete_all_courses():
    """Delete every course together with every question."""
    courses, questions = ContentStore().delete_all_courses()
    current_app.logger.warning("Admin: deleted all %d course(s) and %d question(s)", courses, questions)
    return success_response(
        data={'deleted_courses': courses, 'deleted_questions': questions},
        message="All courses and questions deleted",
    )
