class QuestionUnavailable(Exception):
    """Raised when no next question could be produced. Retry is manual."""
