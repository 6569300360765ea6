"""
textquiz: turn textbook pages into short quizzes and grade the answers.
"""

__version__ = "0.1.0"
