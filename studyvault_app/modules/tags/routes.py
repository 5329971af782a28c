# File: studyvault_app/modules/tags/routes.py
# Tag CRUD and the best-effort lookup used to label questions.

from flask import current_app, url_for

from ...core.defaults import COLOR_PALETTE, DEFAULT_COLOR
from ...core.error_handlers import StoreError, ValidationError, success_response
from ...services.content_cache import get_content_cache
from ...services.content_store import ContentStore
from ...utils.forms import bind_form, request_payload
from .forms import TagForm
from . import blueprint


def _find_tag(tag_id):
    tag = get_content_cache().get_tag(tag_id)
    if tag is None:
        tag = ContentStore().get_or_404('tags', tag_id, redirect=url_for('tags.list_tags'))
    return tag


@blueprint.route('', methods=['GET'])
def list_tags():
    return success_response(data=[tag.to_dict() for tag in get_content_cache().tags])


@blueprint.route('', methods=['POST'])
def create_tag():
    form = bind_form(TagForm, request_payload())
    tag = ContentStore().create('tags', form.to_record())
    return success_response(data=tag.to_dict(), message="Tag created"), 201


@blueprint.route('/<int:tag_id>', methods=['GET'])
def get_tag(tag_id):
    tag = _find_tag(tag_id)
    data = tag.to_dict()
    data['question_count'] = len(ContentStore().questions_with_tag(tag_id))
    return success_response(data=data)


@blueprint.route('/<int:tag_id>', methods=['PUT'])
def update_tag(tag_id):
    existing = _find_tag(tag_id)
    form = bind_form(TagForm, {**existing.to_form_data(), **request_payload()})
    tag = ContentStore().update('tags', tag_id, form.to_record())
    return success_response(data=tag.to_dict(), message="Tag updated")


@blueprint.route('/<int:tag_id>', methods=['DELETE'])
def delete_tag(tag_id):
    _find_tag(tag_id)
    ContentStore().delete('tags', tag_id)
    return success_response(data={'id': tag_id}, message="Tag deleted")


@blueprint.route('/lookup', methods=['POST'])
def lookup_tags():
    """Resolve tag ids for display.

    Unknown ids are skipped and store failures only shrink the result, so a
    question pointing at deleted tags renders as untagged.
    """
    raw_ids = request_payload().get('ids') or []
    if not isinstance(raw_ids, list):
        raise ValidationError("'ids' must be a list", errors={'ids': ["Expected a list of tag ids"]})

    cache = get_content_cache()
    store = ContentStore()
    found, missing = [], []
    for raw_id in raw_ids:
        try:
            tag_id = int(raw_id)
        except (TypeError, ValueError):
            continue
        tag = cache.get_tag(tag_id)
        if tag is None:
            try:
                tag = store.get_by_id('tags', tag_id)
            except StoreError as exc:
                current_app.logger.warning("Tag lookup for %s failed: %s", tag_id, exc.message)
                tag = None
        if tag is None:
            missing.append(tag_id)
        else:
            found.append(tag.to_dict())
    return success_response(data={'tags': found, 'missing': missing})


@blueprint.route('/new', methods=['GET'])
def new_tag():
    return success_response(data={
        'defaults': {'color': DEFAULT_COLOR},
        'palette': [{'value': value, 'label': label} for value, label in COLOR_PALETTE],
    })
