"""Geofenced attendance tracker.

Organized by feature modules (users, geofence, attendance, summary) with a
thin Flask controller layer over service/repository layers.
"""
