"""
Voice Syntax - spoken transcript to markdown and code correction.

A Python library that takes raw speech-recognition output and rewrites
dictated punctuation, markdown commands and code keywords into literal
syntax, optionally asking an LLM to handle the harder cases.
"""

__version__ = "0.1.0"
__author__ = "Brian Weaver"
__description__ = "Spoken transcript to markdown and code correction"
