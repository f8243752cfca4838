"""Timetrack System package.

This package is organized by feature modules (working_hours, accounting,
time_entries, sequences, organizations) with a thin Flask controller layer
and service/repository layers underneath.

The ``accounting`` module is the time accounting engine: pure functions that
classify and split worked intervals and detect overlaps. Persistence, locking
and code allocation live in the feature modules around it.
"""
