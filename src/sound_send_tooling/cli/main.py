"""Main CLI entry point for sound_send tooling."""

import sys

from sound_send_tooling.cli import release_cmd, toolchain_cmd


def _usage() -> None:
    print("Usage: sound-send-tooling [command] [args...]", file=sys.stderr)
    print("Commands (default: release):", file=sys.stderr)
    print(
        "  release           - Verify (fmt, clippy, test) then build the release matrix",
        file=sys.stderr,
    )
    print("  verify            - Run only fmt check, clippy and tests", file=sys.stderr)
    print("  matrix            - List jobs, cargo commands and resolved linkers", file=sys.stderr)
    print(
        "  resolve [--config PATH] <triple>  - Print the linker this host uses for a target",
        file=sys.stderr,
    )
    print(
        "  link [--config PATH] <triple> ... - Forward args to the resolved linker",
        file=sys.stderr,
    )


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        release_cmd.run_release_argv([])
        return

    command = sys.argv[1]

    if command == "release":
        release_cmd.run_release_argv()
    elif command == "verify":
        release_cmd.run_verify_argv()
    elif command == "matrix":
        release_cmd.run_matrix_argv()
    elif command == "resolve":
        toolchain_cmd.run_resolve_argv()
    elif command == "link":
        toolchain_cmd.run_link_argv()
    elif command in ("-h", "--help", "help"):
        _usage()
        sys.exit(0)
    elif command.startswith("-"):
        # Flags only (e.g. --project-root X): default command
        release_cmd.run_release_argv(sys.argv[1:])
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        _usage()
        sys.exit(1)


if __name__ == "__main__":
    main()
