# -*- coding: utf-8 -*-
"""
backend/app/modules/jobs/enums/__init__.py
"""

from .job_enums import JobName, JobStatus

__all__ = ["JobName", "JobStatus"]
