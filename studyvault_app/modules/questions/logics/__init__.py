from .filter_engine import FilterSpec, filter_by_tags, resolve_questions

__all__ = ['FilterSpec', 'filter_by_tags', 'resolve_questions']
