"""
Endpoints de la API v1.

Módulos disponibles:
- auth: Login y sesión del personal
- defensorias: Directorio del personal y responsables
- directorio: Directorio público
- health: Health check
- reportes: Estadísticas de defensorías
- sincronizacion: Estado de sincronización con SISDNA
- supervisiones: Supervisiones y seguimiento
- ubigeos: Selector de departamento, provincia y distrito
"""
