"""Main CLI entry point for f3d tooling."""

import sys

from f3d_tooling.cli import native_libs_cmd


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print("Usage: f3d-tooling <command> [args...]", file=sys.stderr)
        print("Commands:", file=sys.stderr)
        print(
            "  update-native-libs  - Clone F3D, build libf3d-java.so per ABI in Docker, copy into app/",
            file=sys.stderr,
        )
        sys.exit(1)

    command = sys.argv[1]

    if command == "update-native-libs":
        native_libs_cmd.run_native_libs_argv()
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
