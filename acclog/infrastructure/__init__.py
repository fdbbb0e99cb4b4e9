"""Infrastructure - settings and database plumbing"""
