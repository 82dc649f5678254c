# -*- coding: utf-8 -*-
"""
backend/app/modules/jobs/models/__init__.py
"""

from .job_execution_models import JobExecution

__all__ = ["JobExecution"]
