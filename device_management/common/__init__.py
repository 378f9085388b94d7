"""
Package marker for source code under `device_management.common`.
Cross-cutting helpers: settings, logging, and identifier generation.
"""
