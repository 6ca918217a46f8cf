"""Chat with a locally hosted language model, with retrieval-augmented answers."""

__version__ = "1.0.0"
