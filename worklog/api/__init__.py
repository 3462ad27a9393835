"""
REST API for the worklog application.
"""
