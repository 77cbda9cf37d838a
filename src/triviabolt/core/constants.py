"""Domain data for cleaning OCR text from the quiz overlay."""

# Overlay fragments that bleed into the question strip
UI_ARTIFACT_PATTERNS = [
    r"question\s*:\s*\d+/\d+",  # "Question: 3/10"
    r"score\s*:\s*[+\d,]+",  # "Score: +1,250"
]

# Function words and quiz boilerplate that carry no matching signal
STOP_WORDS = frozenset({
    "the", "is", "a", "an", "in", "of", "to", "and", "for", "with", "on",
    "at", "by", "which", "was", "were", "who", "what", "year", "many", "has",
    "how", "top", "league", "premier",
})
