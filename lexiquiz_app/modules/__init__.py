"""Feature modules for LexiQuiz."""
