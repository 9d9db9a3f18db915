"""Classroom Attendance package.

Feature modules (users, classes, subjects, attendance) each carry a thin Flask
controller over service and repository layers backed by MySQL.
"""
