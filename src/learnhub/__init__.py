"""learnhub - personal learning hub for books, courses and study time."""

__version__ = "0.1.0"
