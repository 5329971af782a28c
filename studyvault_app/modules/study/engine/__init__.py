from .controller import StudySessionController, StudyStep

__all__ = ['StudySessionController', 'StudyStep']
