"""API dependencies for identity and collaborators"""
