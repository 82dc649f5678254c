# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/services/__init__.py
"""

from .cascade_phase_runner import PhaseResult, run_cascade_phase, STALL_THRESHOLD
from .folder_stats_service import FolderStatsService

__all__ = ["PhaseResult", "run_cascade_phase", "STALL_THRESHOLD", "FolderStatsService"]
