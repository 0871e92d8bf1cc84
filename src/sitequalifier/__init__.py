"""
SiteQualifier - qualifies websites against an Ideal Customer Profile.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config, RunInput
from .container import DependencyContainer, run_qualification
from .pipeline import Pipeline

__all__ = ["__version__", "Config", "DependencyContainer", "Pipeline", "RunInput", "run_qualification"]
