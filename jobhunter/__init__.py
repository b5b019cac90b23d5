"""jobhunter: daily and weekly job-search checklist tracker."""

__version__ = "0.1.0"
