# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/commands/__init__.py

Comandos de consola del módulo Folders (ver [project.scripts]).
"""
