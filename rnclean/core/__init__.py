"""Core — models, engine, configuration and use cases."""
