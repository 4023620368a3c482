"""
Domain services built on the storage context.

Modules:
- credentials: login, registration, principal resolution, admin bootstrap
- applications: recruitment submissions and statistics
- dashboard: admin dashboard counts
- scheduler: one-shot startup jobs (APScheduler)
"""
