# -*- coding: utf-8 -*-
"""
backend/app/__init__.py

Inicializador del paquete principal 'app' del backend de almacenamiento.

Funciones:
- Asegura compatibilidad del event loop de asyncio en Windows
  (asyncpg + SQLAlchemy Async).
- Permite que los módulos internos puedan importarse como 'app.*'
  cuando la carpeta 'backend' se incluye en PYTHONPATH.

Autor: Equipo Backend
Fecha: 2026-10-02
"""
import sys
import asyncio

if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Fin del archivo backend/app/__init__.py
