"""
Tools package: adapters to external services.

  - vision (subpackage): completions clients for the tagging pipeline
"""
