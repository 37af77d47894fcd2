"""
Timing and presentation services for the snake engine.
"""
