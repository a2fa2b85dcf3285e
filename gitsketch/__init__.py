"""
gitsketch - keep Sketch design files reviewable in git

Unpacks .sketch containers into a diff-friendly directory, exports rendered
artboards with fonts embedded, stages the result and keeps a README image
index up to date.

Architecture:
- Archive Context: .sketch unpacking, repacking and JSON normalization
- Versioning Context: git status inspection and staging
- Exporting Context: sketchtool export and SVG font embedding
- Documentation Context: README image region maintenance
- Syncing Context: import / stage / generate workflows
"""

__version__ = "0.1.0"
