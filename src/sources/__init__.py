"""Where package identity and source location come from.

``manifest`` reads the package manifest on disk, ``vcs`` asks the local
checkout for its server remotes, and ``index_service`` asks the package
index for tag records.
"""
