"""
Package marker for source code under `device_management`.
Sensor registration and monitoring coordination service.
"""
