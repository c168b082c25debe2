"""
ACL service for role-based authorization.
"""
