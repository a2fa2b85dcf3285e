"""
Versioning Context

Responsibilities:
- Reads git working tree status
- Stages generated files, including deletions of regenerated trees

Owns: All git invocations
Never: Commits, pushes or rewrites history
"""

from gitsketch.contexts.versioning.git import FileStatus, GitRepository, parse_porcelain

__all__ = ["FileStatus", "GitRepository", "parse_porcelain"]
