"""delphi_server - FastAPI REST API for Delphi estimation sessions.

Exposes the SessionRepository and the aggregation helpers over HTTP:
session lifecycle, members, work packages, per-user estimates, averaged
estimates and max-distance ranking.
"""
