"""Session builder modules for keyword study sessions."""

from keyword_srs.session_builders.study_set import (
    DueKeyword,
    StudyCandidate,
    get_due_keywords,
    select_keywords_for_study,
)

__all__ = [
    "DueKeyword",
    "StudyCandidate",
    "get_due_keywords",
    "select_keywords_for_study",
]
