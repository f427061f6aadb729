"""
Server Watchdog.

A lightweight endpoint watchdog: every configured server is polled over HTTP
for a bounded observation window, and operators are emailed when a server
keeps failing its health checks.
"""

__version__ = "0.1.0"
