"""`f3d-tooling` command line: dispatch and per-command argv parsing."""
