# -*- coding: utf-8 -*-
"""
backend/app/modules/jobs/__init__.py

Registro append-only de ejecuciones de jobs (tabla job_executions).

Cada corrida de un job periódico crea una fila RUNNING al iniciar y la
finaliza una sola vez (COMPLETED o FAILED). El startedAt de la última
corrida COMPLETED funciona como watermark para la siguiente.
"""
