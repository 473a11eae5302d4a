"""SafePass package.

Student check-in/check-out tracking and safety alerts, organized by feature
modules (users, students, scans, alerts, reports, ...) with a thin Flask
controller layer over service and repository layers.
"""
