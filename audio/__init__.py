"""
Audio lookup pipeline.

Request parameter handling, pre-recorded candidate ranking, TTS
orchestration and response assembly.
"""
