"""
keyword_srs - spaced-repetition scheduling and keyword mastery tracking.

Subpackages:
    - srs: pure algorithm core (grading, mastery, color, need, SM-2)
    - session_builders: study set selection
    - analytics: pandas summaries of a keyword collection

Modules:
    - coverage: practice-material gap analysis
    - config: component configs and KEYWORD_SRS_* overrides
    - logging_config: logger setup
"""

__version__ = "0.1.0"
