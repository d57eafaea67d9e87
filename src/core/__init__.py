"""Core domain package for the comment linkifier.

Core contains link rules, matching, and segment resolution without any
rendering or configuration-file specific code, keeping the parser portable.
"""
