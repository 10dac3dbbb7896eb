"""Quiz module: session composition, distractors, MCQ assembly and the quiz API."""
