"""
Activity audit log

Persists the activity events published by the resident, room and payment services.
"""
