"""
Query CLI Module.

Architecture:
- cli.py parses the command line and owns process exit codes
- dispatcher resolves a command to one upstream query
- formatting turns upstream records into report lines
"""
