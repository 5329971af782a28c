# File: studyvault_app/modules/study/config.py

class StudyModuleDefaultConfig:
    """Defaults for the study wizard, overridable through app config."""

    # Tag names that count as question-type categories.
    QUESTION_TYPE_TAGS = (
        'Problem Solving',
        'Multiple Choice',
        'True/False',
        'Short Answer',
        'Essay',
        'Coding',
    )

    # Queue ids live in the signed session cookie (about 4 KB in browsers).
    MAX_QUEUE_LENGTH = 200
