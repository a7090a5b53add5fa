"""AI document search: keyword and semantic retrieval over typed and uploaded documents."""

__version__ = "0.1.0"
