"""Realtime delivery (Socket.IO).

Holds the identity registry, the presence gateway that keeps it current and
the dispatcher that pushes targeted events. Request handlers should go
through the publishers in ``photofeed.realtime.events``.
"""
