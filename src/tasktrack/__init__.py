"""Tasktrack — personal task tracking API.

Users register and log in with an email and password, receive a signed
session cookie, and manage tasks that only they can see: create, list with
filters and pagination, update, bulk status changes, delete.
"""

__version__ = "0.1.0"
