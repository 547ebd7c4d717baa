"""
Pronunciation helpers.

Kana normalization, pronunciation variant generation and pitch catalog
resolution.
"""
