"""
Service backends: TTS synthesizers, object stores and datasets.
"""
