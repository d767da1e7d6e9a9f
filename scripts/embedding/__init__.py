"""
Command-line embedding pipeline.

This package contains:
- Configuration resolution (config.py)
- Matrix loading and writing (data_io.py)
- Callback strategies (callbacks.py)
- Invocation of the reduction collection (invoker.py)
- Result serialization (writer.py)
- The command-line entry point (embed.py)
"""
