"""
Pi-hole API Client - Shared Definitions
"""
