"""
backend/app/shared/scheduler/__init__.py

Scheduler APScheduler compartido. El reconciliador de la cascada de
borrado se registra aquí desde el lifespan de la aplicación.

Autor: Equipo Backend
Fecha: 2026-10-03
"""

from .scheduler_service import SchedulerService, get_scheduler

__all__ = ["SchedulerService", "get_scheduler"]
