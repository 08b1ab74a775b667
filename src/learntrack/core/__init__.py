"""Core learntrack functionality: dashboard store, remote adapters, configuration."""
