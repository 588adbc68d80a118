"""
Google Calendar API layer: credentials, calendars, events.
"""
