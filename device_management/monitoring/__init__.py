"""
Package marker for source code under `device_management.monitoring`.
Outbound transport and client for the sensor monitoring service.
"""
