# app/shared/__init__.py
"""
Utilidades compartidas entre módulos: configuración, base de datos,
scheduler, Redis y autenticación de servicio interno.

No inicializa settings en import-time para evitar efectos colaterales
durante la recolección de tests.
"""
# fin del archivo
