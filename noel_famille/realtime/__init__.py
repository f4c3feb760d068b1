"""Realtime infrastructure (Socket.IO).

One socket server for every event page: chat, polls, contributions and
tasks all publish through the same `event:<id>` rooms.
"""
