# File: studyvault_app/core/defaults.py
"""Shared constants for content records."""

DEFAULT_COLOR = '#4f46e5'

COLOR_PALETTE = (
    ('#4f46e5', 'Indigo'),
    ('#16a34a', 'Green'),
    ('#ea580c', 'Orange'),
    ('#dc2626', 'Red'),
    ('#2563eb', 'Blue'),
    ('#9333ea', 'Purple'),
    ('#db2777', 'Pink'),
    ('#65a30d', 'Lime'),
    ('#0891b2', 'Cyan'),
    ('#f59e0b', 'Amber'),
)

HEX_COLOR_PATTERN = r'^#[0-9a-fA-F]{6}$'

DIFFICULTIES = ('easy', 'medium', 'hard')
DEFAULT_DIFFICULTY = 'medium'

# Sentinel used by filters and the study wizard for "no constraint".
ANY = 'all'

QUESTION_TYPES = (
    ('problem_solving', 'Problem Solving'),
    ('multiple_choice', 'Multiple Choice'),
    ('true_false', 'True/False'),
    ('short_answer', 'Short Answer'),
    ('essay', 'Essay'),
    ('coding', 'Coding'),
)
DEFAULT_QUESTION_TYPE = 'problem_solving'

DEFAULT_ESTIMATED_TIME = 15


def contrast_color(hex_color):
    """Return black or white text color for the given background."""
    value = (hex_color or DEFAULT_COLOR).lstrip('#')
    try:
        red = int(value[0:2], 16)
        green = int(value[2:4], 16)
        blue = int(value[4:6], 16)
    except ValueError:
        return '#ffffff'
    luminance = (0.299 * red + 0.587 * green + 0.114 * blue) / 255
    return '#000000' if luminance > 0.5 else '#ffffff'
