"""
Infrastructure layer

Configuration, logging, persistence and wiring.
"""
