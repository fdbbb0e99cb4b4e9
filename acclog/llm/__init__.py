"""LLM - Gemini access and the insight text generator"""
