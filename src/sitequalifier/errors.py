"""
Exception hierarchy for SiteQualifier.

Only InputValidationError and BrowserLaunchError are allowed to end a run;
everything else is turned into a DISQUALIFY record by the component that
catches it.
"""

from __future__ import annotations

from typing import List, Optional


class SiteQualifierError(Exception):
    """Base class for all project errors."""


class InputValidationError(SiteQualifierError):
    """The run input is missing required values or has the wrong shape."""

    def __init__(self, message: str, problems: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.problems = problems or []


class BrowserLaunchError(SiteQualifierError):
    """The headless browser could not be started."""


class ClassificationError(SiteQualifierError):
    """The classification service did not produce a usable answer."""


class EmptyResponseError(ClassificationError):
    """The service answered without any generated text."""

    def __init__(self, message: str = "No response from AI") -> None:
        super().__init__(message)
