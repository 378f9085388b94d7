"""
Package marker for source code under `device_management.domain`.
Sensor records and the error types shared by the service layers.
"""
