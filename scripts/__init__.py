"""
Scripts for dense matrix embedding.

This package contains:
- The embedding command-line pipeline (embedding/)
"""
