"""
Package marker for source code under `device_management.repositories`.
Persistence for sensor records.
"""
