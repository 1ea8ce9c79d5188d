#!/usr/bin/env python3
"""Iteration workflow example.

This example demonstrates the branch-per-iteration workflow:
- Initializing a versioned workspace
- Spawning alternate branches for experiments
- Promoting the winning experiment back to the main branch
"""

import shutil
from pathlib import Path
from tempfile import mkdtemp

from iterspace import VersionedWorkspace, Workspace


def main() -> None:
    """Run two experiments and promote one of them."""
    project_dir = Path(mkdtemp(prefix="iterspace_"))
    fs = Workspace(project_dir)
    fs.write('print("Version 1")\n', "main.py")

    try:
        ws = VersionedWorkspace("example", project_dir)
        print(f"State: {ws.state.value}, branch: {ws.current_branch}")

        # First experiment
        ws.branch_from("A", "try version 2")
        fs.write('print("Version 2")\n', "main.py")
        print(f"Commit on {ws.current_branch}: {ws.commit('Version 2')}")

        # Second experiment, started from the first
        ws.branch_from("B", "try version 3")
        fs.write('print("Version 3")\n', "main.py")
        print(f"Commit on {ws.current_branch}: {ws.commit('Version 3')}")

        # Keep the first experiment
        revision = ws.rewrite_to_main("B", "Promote version 2")
        print(f"Main is now {revision[:7]}: {fs.read('main.py').strip()}")

        print("\n=== History of A ===")
        for entry in ws.get_history():
            print(f"  {entry}")

        ws.purge()
        print(f"\nPurged, metadata present: {fs.exists('.git')}")

    finally:
        shutil.rmtree(project_dir, ignore_errors=True)


if __name__ == "__main__":
    main()
