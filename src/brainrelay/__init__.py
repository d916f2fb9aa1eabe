"""Brain Relay — sequences OpenAI assistants over a brain dump and stores each stage."""

__version__ = "0.1.0"
