# -*- coding: utf-8 -*-
"""
backend/app/modules/jobs/repositories/__init__.py
"""

from .job_execution_repository import JobExecutionRepository

__all__ = ["JobExecutionRepository"]
