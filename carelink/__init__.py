"""CareLink API package.

Emergency care requests, notification fan-out and delivery for the care
booking platform.
"""
