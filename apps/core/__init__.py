"""
Core app: users, PIN login and role permissions.
"""
