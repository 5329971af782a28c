"""
Central Signal Registry for content events.

Uses blinker namespaces so the content cache (and anything else) can react to
store writes without the store knowing about its listeners.

Usage:
    # Publisher (sender)
    from studyvault_app.core.signals import content_deleted
    content_deleted.send(app, collection='tags', record_id=3)

    # Subscriber (receiver)
    @content_deleted.connect
    def on_content_deleted(sender, **kwargs):
        ...
"""
from blinker import Namespace

content_signals = Namespace()

# Signal: Fired after a record is created
# Payload: collection ('courses' | 'questions' | 'tags'), record (DTO)
content_created = content_signals.signal('content-created')

# Signal: Fired after a record is updated
# Payload: collection, record (DTO)
content_updated = content_signals.signal('content-updated')

# Signal: Fired after a record is deleted
# Payload: collection, record_id (int)
content_deleted = content_signals.signal('content-deleted')

# Signal: Fired after a bulk delete emptied one or more collections
# Payload: collections (tuple of collection names)
content_purged = content_signals.signal('content-purged')
