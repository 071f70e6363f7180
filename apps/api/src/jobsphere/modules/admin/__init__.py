"""
Admin Module

Platform administration: user approval and role changes, cascading user
deletion, job moderation and dashboard statistics.
"""
