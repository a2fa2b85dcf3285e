"""
Syncing Context

Responsibilities:
- Runs the import, stage and generate workflows end to end
- Enforces the <name>/<name>.sketch directory layout

Owns: Step ordering across contexts
Never: Implements archive, git, export or README details itself
"""

from gitsketch.contexts.syncing.workflow import (
    StageResult,
    generate_sketch,
    import_sketch,
    stage_sketch,
)

__all__ = ["StageResult", "generate_sketch", "import_sketch", "stage_sketch"]
