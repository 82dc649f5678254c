# -*- coding: utf-8 -*-
"""
backend/app/shared/scheduler/scheduler_service.py

Servicio de programación de tareas periódicas usando APScheduler.

Política de ejecución para los jobs de mantenimiento:
- max_instances=1: nunca dos corridas del mismo job en el proceso
- coalesce=True: ejecuciones perdidas se combinan en una sola
- misfire_grace_time=None: una corrida lenta nunca se considera "perdida"
  ni provoca un arranque duplicado

Autor: Equipo Backend
Fecha: 2026-10-03
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)


class SchedulerService:
    """
    Servicio de programación de tareas periódicas.

    Funcionalidades:
    - Jobs a intervalos regulares, una sola instancia por job
    - Registro y eliminación dinámica de jobs
    - Consulta del estado de los jobs registrados
    """

    def __init__(self):
        """Inicializa el scheduler con la política de ejecución por defecto."""
        self._job_defaults = job_defaults = {
            'coalesce': True,
            'max_instances': 1,
            'misfire_grace_time': None,
        }

        self._scheduler = AsyncIOScheduler(
            jobstores={'default': MemoryJobStore()},
            executors={'default': AsyncIOExecutor()},
            job_defaults=job_defaults,
            timezone='UTC'
        )
        self._started = False
        logger.info("SchedulerService inicializado")

    def start(self):
        """Inicia el scheduler."""
        if not self._started:
            self._scheduler.start()
            self._started = True
            logger.info("SchedulerService iniciado")

    def shutdown(self, wait: bool = True):
        """
        Detiene el scheduler.

        Args:
            wait: Si True, espera a que terminen los jobs en ejecución
        """
        if self._started:
            self._scheduler.shutdown(wait=wait)
            self._started = False
            logger.info("SchedulerService detenido")

    def add_interval_job(
        self,
        func: Callable[..., Any],
        job_id: str,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        next_run_time: Optional[datetime] = None,
        **kwargs
    ) -> str:
        """
        Agrega (o reemplaza) un job que se ejecuta a intervalos regulares.

        Args:
            func: Corutina o función a ejecutar
            job_id: ID único del job
            hours/minutes/seconds: Intervalo
            next_run_time: Primera ejecución; por defecto al cumplirse el intervalo
            **kwargs: Argumentos para func

        Returns:
            ID del job agregado
        """
        if hours <= 0 and minutes <= 0 and seconds <= 0:
            raise ValueError(f"Intervalo inválido para job '{job_id}'")

        trigger = IntervalTrigger(hours=hours, minutes=minutes, seconds=seconds)

        options = {}
        if next_run_time is not None:
            options['next_run_time'] = next_run_time

        self._scheduler.add_job(
            func=func,
            trigger=trigger,
            id=job_id,
            name=job_id,
            replace_existing=True,
            kwargs=kwargs,
            **options
        )

        logger.info(f"Job '{job_id}' agregado: cada {hours}h {minutes}m {seconds}s")
        return job_id

    def remove_job(self, job_id: str) -> bool:
        """
        Elimina un job programado.

        Returns:
            True si se eliminó, False si no existía
        """
        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            logger.warning(f"No se pudo eliminar job '{job_id}': no existe")
            return False
        logger.info(f"Job '{job_id}' eliminado")
        return True

    def get_jobs(self) -> list:
        """Lista de jobs programados con información básica."""
        return [
            {
                'id': job.id,
                'name': job.name,
                'next_run': getattr(job, 'next_run_time', None),
                'trigger': str(job.trigger),
            }
            for job in self._scheduler.get_jobs()
        ]

    def get_job_status(self, job_id: str) -> Optional[dict]:
        """Estado de un job específico, o None si no existe."""
        job = self._scheduler.get_job(job_id)
        if job:
            return {
                'id': job.id,
                'name': job.name,
                'next_run': getattr(job, 'next_run_time', None),
                'trigger': str(job.trigger),
                'max_instances': getattr(job, 'max_instances', self._job_defaults['max_instances']),
            }
        return None

    @property
    def is_running(self) -> bool:
        """Retorna True si el scheduler está activo."""
        return self._started and self._scheduler.running


# Singleton global del scheduler
_scheduler_instance: Optional[SchedulerService] = None


def get_scheduler() -> SchedulerService:
    """Obtiene la instancia global del scheduler (singleton)."""
    global _scheduler_instance
    if _scheduler_instance is None:
        _scheduler_instance = SchedulerService()
    return _scheduler_instance


# Fin del archivo backend/app/shared/scheduler/scheduler_service.py
