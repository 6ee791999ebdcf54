"""Mediscreen microservices.

Service layout:
- Patient registry and notes store are external collaborators reached over HTTP
- Assessment Service derives a diabetes risk level from patient data and notes
- All services use hash_pii() for patient identifiers in logs
"""
