# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/__init__.py

Árbol de carpetas/archivos por usuario y mantenimiento del borrado en
cascada diferido:

- Reconciliación periódica de la cascada de `removed` (DeletedItemsCleanupJob)
- Barrido retroactivo por usuario (RetroactiveItemsCleanupJob)
- Estadísticas de carpeta con banderas de exactitud (FolderStatsService)
- Migración única de deduplicación de carpetas
"""
