#!/usr/bin/env python3
"""gh-switch command line interface.

Usage:
    gh-switch <command> [options]

Environment variables:
    GH_SWITCH_HOME         Override the home directory (config + ~/.ssh)
    GH_SWITCH_LOG_LEVEL    Console log level (default: WARNING)
    GH_SWITCH_LOG_FILE     Debug log file (default: ~/.gh-switch/gh-switch.log)
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

from .config.paths import SwitchPaths
from .config.schema import Profile, is_valid_email, is_valid_profile_name
from .errors import GhSwitchError, NotFoundError, ValidationError
from .switcher import IdentitySwitcher
from .system.base import SystemCollaborator
from .system.local import LocalSystem
from .utils.keys import (
    check_key_permissions,
    default_ssh_key,
    detect_ssh_keys,
    fix_key_permissions,
    read_public_key,
)
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

RULE = "-" * 80


# === Prompt helpers ===

def prompt(
    message: str,
    default: Optional[str] = None,
    validate: Optional[Callable[[str], Optional[str]]] = None,
) -> str:
    """Ask until ``validate`` returns None. EOF propagates to main()."""
    suffix = f" [{default}]" if default else ""
    while True:
        answer = input(f"{message}{suffix}: ").strip()
        if not answer and default is not None:
            answer = default
        error = validate(answer) if validate else None
        if error is None:
            return answer
        print(f"  {error}")


def confirm(message: str, default: bool = False) -> bool:
    hint = "Y/n" if default else "y/N"
    answer = input(f"{message} [{hint}]: ").strip().lower()
    if not answer:
        return default
    return answer in ("y", "yes")


def choose(message: str, options: list[tuple[str, str]], default: int = 0) -> str:
    """Numbered menu; returns the value of the picked option."""
    print(message)
    for i, (label, _) in enumerate(options, start=1):
        print(f"  {i}) {label}")

    def check(answer: str) -> Optional[str]:
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return None
        return f"Enter a number between 1 and {len(options)}"

    picked = prompt("Choice", default=str(default + 1), validate=check)
    return options[int(picked) - 1][1]


def _required(label: str) -> Callable[[str], Optional[str]]:
    return lambda value: None if value else f"{label} is required"


def _check_profile_name(value: str) -> Optional[str]:
    if not value:
        return "Profile name is required"
    if not is_valid_profile_name(value):
        return "Profile name can only contain letters, numbers, hyphens, and underscores"
    return None


def _check_email(value: str) -> Optional[str]:
    if not value:
        return "Git user email is required"
    if not is_valid_email(value):
        return "Please enter a valid email address"
    return None


def _print_profile(profile: Profile, active: bool = False, show_key: bool = False) -> None:
    marker = "* " if active else "  "
    print(f"{marker}{profile.name}")
    print(f"    GitHub: {profile.github_username}")
    print(f"    Email: {profile.git_email}")
    print(f"    SSH Host: {profile.ssh_host}")
    if show_key:
        print(f"    SSH Key: {profile.ssh_key_path}")


# === Commands ===

def _ask_key_path(switcher: IdentitySwitcher) -> str:
    keys = detect_ssh_keys(switcher.paths.ssh_dir)
    if not keys:
        return prompt("Path to SSH private key", default="~/.ssh/id_rsa")

    print(f"Found {len(keys)} SSH key(s) in {switcher.paths.ssh_dir}")
    suggested = default_ssh_key(keys)
    options = [
        (f"{k.name}{' (has .pub)' if k.has_public_key else ''}", str(k.path))
        for k in keys
    ]
    options.append(("Enter custom path...", ""))
    default_index = next(
        (i for i, k in enumerate(keys) if k.path == suggested), 0
    )

    picked = choose("Select SSH private key:", options, default=default_index)
    return picked or prompt("Enter custom SSH key path", default="~/.ssh/id_rsa")


def _add_profile(
    switcher: IdentitySwitcher,
    args: argparse.Namespace,
    default_name: Optional[str] = None,
) -> int:
    """Collect, validate and save one profile (shared by init and add)."""
    detected = switcher.system.get_global_identity()

    name = args.name or prompt(
        "Profile name (e.g., personal, work)", default=default_name,
        validate=_check_profile_name,
    )
    if switcher.store.profile_exists(name):
        print(f'Profile "{name}" already exists and will be updated.')

    git_name = args.git_name or prompt(
        "Git user name", default=detected.name or None,
        validate=_required("Git user name"),
    )
    git_email = args.git_email or prompt(
        "Git user email", default=detected.email or None, validate=_check_email,
    )
    github_username = args.github_username or prompt(
        "GitHub username", validate=_required("GitHub username"),
    )
    key_path = args.ssh_key or _ask_key_path(switcher)

    profile = switcher.build_profile(name, git_name, git_email, github_username, key_path)

    conflict = switcher.key_conflict(profile.ssh_key_path, exclude=profile.name)
    if conflict:
        print(f'\nWarning: this SSH key is already used by the "{conflict}" profile.')
        print("GitHub does not allow the same SSH key on multiple accounts.")
        if not args.ssh_key and confirm(
            "Generate a new SSH key for this profile?", default=True
        ):
            generated = switcher.generate_key(profile.name, profile.git_email)
            print(f"\nPrivate key: {generated.private_key_path}")
            print(f"Public key: {generated.public_key_path}\n")
            print("Add this public key to your GitHub account")
            print("(GitHub -> Settings -> SSH and GPG keys -> New SSH key):\n")
            print(RULE)
            print(generated.public_key)
            print(RULE)
            if not confirm("\nHave you added the SSH key to your GitHub account?"):
                print(f"\nAdd the key, then run this command again with --ssh-key "
                      f"{generated.private_key_path}\n")
                return 0
            profile = switcher.build_profile(
                name, git_name, git_email, github_username, str(generated.private_key_path)
            )

    key_file = Path(profile.ssh_key_path)
    if not check_key_permissions(key_file):
        print(f"\nWarning: {key_file} should only be readable by you (chmod 600).")
        if not args.ssh_key and confirm("Fix the permissions now?", default=True):
            fix_key_permissions(key_file)

    result = switcher.add_profile(profile)

    print("\nProfile added successfully!\n")
    _print_profile(result.profile)
    public_key = read_public_key(key_file)
    if public_key:
        print("\nPublic key (must be added to this GitHub account):")
        print(public_key)
    print("\nNext steps:")
    print(f"  1. Test the connection: gh-switch verify {profile.name}")
    print(f"  2. Switch to this profile: gh-switch use {profile.name}")
    print(f"  3. Clone a repo: gh-switch clone <repo-url> {profile.name}")
    print("  4. Add more profiles: gh-switch add\n")
    return 0


def cmd_init(switcher: IdentitySwitcher, args: argparse.Namespace) -> int:
    switcher.require_git()

    profiles = switcher.store.list_profiles()
    if profiles:
        print("gh-switch is already initialized.")
        print(f"You have {len(profiles)} profile(s) configured.")
        print('Use "gh-switch add" to add more profiles.')
        return 0

    print("Welcome to gh-switch!\n")
    identity = switcher.system.get_global_identity()
    if identity.is_set:
        print("Detected existing Git configuration:")
        print(f"  Name: {identity.name}")
        print(f"  Email: {identity.email}\n")

    return _add_profile(switcher, args, default_name="personal")


def cmd_add(switcher: IdentitySwitcher, args: argparse.Namespace) -> int:
    return _add_profile(switcher, args)


def cmd_list(switcher: IdentitySwitcher, args: argparse.Namespace) -> int:
    doc = switcher.store.load()

    if not doc.profiles:
        print("No profiles configured yet.")
        print('Run "gh-switch init" to add your first profile.')
        return 0

    print(f"GitHub Account Profiles ({len(doc.profiles)})\n")
    for profile in doc.profiles:
        _print_profile(profile, active=profile.name == doc.active_profile)
        print()

    if doc.active_profile:
        print(f"Currently active: {doc.active_profile}")
    else:
        print('No active profile. Use "gh-switch use <profile>" to activate one.')
    return 0


def cmd_use(switcher: IdentitySwitcher, args: argparse.Namespace) -> int:
    switcher.require_git()

    name = args.profile
    if not name:
        profiles = switcher.store.list_profiles()
        if not profiles:
            print("No profiles configured yet.")
            print('Run "gh-switch init" to add your first profile.')
            return 0
        name = choose("Select a profile to switch to:", [
            (f"{p.name} ({p.github_username} - {p.git_email})", p.name)
            for p in profiles
        ])

    profile = switcher.use(name)

    print(f"Switched to profile: {profile.name}\n")
    print("Global git config updated:")
    print(f"  user.name: {profile.git_name}")
    print(f"  user.email: {profile.git_email}")
    print(f"  GitHub: {profile.github_username}")
    print(f"  SSH Host: {profile.ssh_host}")
    return 0


def cmd_current(switcher: IdentitySwitcher, args: argparse.Namespace) -> int:
    switcher.require_git()
    status = switcher.current()

    if status.active:
        print("Active Profile:")
        print(f"  Name: {status.active.name}")
        print(f"  GitHub: {status.active.github_username}")
        print(f"  Email: {status.active.git_email}")
        print(f"  SSH Host: {status.active.ssh_host}")
        print(f"  SSH Key: {status.active.ssh_key_path}")
    else:
        print("Active Profile: None")
        print('Use "gh-switch use <profile>" to activate a profile.')

    print("\nGlobal Git Config:")
    print(f"  user.name: {status.git_identity.name or '(not set)'}")
    print(f"  user.email: {status.git_identity.email or '(not set)'}")

    if not status.in_sync:
        print("\nWarning: Global git config does not match active profile.")
        print(f'Run "gh-switch use {status.active.name}" to sync the configuration.')
    return 0


def cmd_clone(switcher: IdentitySwitcher, args: argparse.Namespace) -> int:
    switcher.require_git()
    profile = switcher.resolve_profile(args.profile)

    print(f"Cloning with profile {profile.name} ({profile.github_username})...")
    repo_path = switcher.clone(args.url, profile.name, args.dest)

    print(f"\nRepository cloned to {repo_path}")
    print(f"Local git identity: {profile.git_name} <{profile.git_email}>")
    return 0


def cmd_verify(switcher: IdentitySwitcher, args: argparse.Namespace) -> int:
    if not args.profile and not switcher.store.list_profiles():
        print("No profiles configured yet.")
        print('Run "gh-switch init" to add your first profile.')
        return 0

    print("Verifying SSH connections to GitHub...\n")
    results = switcher.verify(args.profile)

    for result in results:
        status = "OK" if result.success else "FAILED"
        print(f"  {result.profile_name}: {status}: {result.message}")

    failures = [r for r in results if not r.success]
    print(f"\nSuccessful: {len(results) - len(failures)}")
    print(f"Failed: {len(failures)}")

    if failures:
        print("\nTroubleshooting tips:")
        print("  1. Ensure your SSH key is added to your GitHub account")
        print("  2. Check the key path with: gh-switch config")
        print("  3. Test manually: ssh -vT git@<ssh-host>")
        return 1
    return 0


def cmd_remove(switcher: IdentitySwitcher, args: argparse.Namespace) -> int:
    name = args.profile
    if not name:
        profiles = switcher.store.list_profiles()
        if not profiles:
            print("No profiles configured yet.")
            return 0
        name = choose("Select a profile to remove:", [
            (f"{p.name} ({p.github_username})", p.name) for p in profiles
        ])

    profile = switcher.store.get_profile(name)
    if profile is None:
        raise NotFoundError(f'Profile "{name}" not found')

    print("Profile to remove:")
    _print_profile(profile)

    if not args.yes and not confirm(f'\nRemove profile "{name}"?'):
        print("Cancelled. No changes made.")
        return 0

    switcher.remove_profile(name)
    print("Profile removed successfully!")
    print("SSH config entry has been removed.")
    print("The SSH key file itself has not been deleted.")
    return 0


def cmd_config(switcher: IdentitySwitcher, args: argparse.Namespace) -> int:
    config_path = switcher.store.config_path

    if not switcher.store.exists():
        print("Configuration file does not exist yet.")
        print('Run "gh-switch init" to create it.')
        return 0

    if args.edit:
        print(f"Opening {config_path} in editor...")
        switcher.system.open_in_editor(config_path)
        # Surface a broken hand edit right away
        switcher.store.load()
        return 0

    doc = switcher.store.load()
    print(f"Configuration File: {config_path}")
    print(f"SSH Config: {switcher.ssh_config.config_path}\n")
    print(doc.to_yaml().rstrip())
    return 0


COMMANDS = {
    "init": cmd_init,
    "add": cmd_add,
    "list": cmd_list,
    "use": cmd_use,
    "current": cmd_current,
    "clone": cmd_clone,
    "verify": cmd_verify,
    "remove": cmd_remove,
    "config": cmd_config,
}


def _add_profile_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", help="Profile name (letters, digits, - and _)")
    parser.add_argument("--git-name", help="Git user.name")
    parser.add_argument("--git-email", help="Git user.email")
    parser.add_argument("--github-username", help="GitHub username")
    parser.add_argument("--ssh-key", help="Path to the SSH private key")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gh-switch",
        description="Easily switch between multiple GitHub accounts on the same machine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # First-time setup
    gh-switch init

    # Add a profile without prompts
    gh-switch add --name work --git-name "Jane Doe" --git-email jane@acme.com \\
        --github-username jdoe-acme --ssh-key ~/.ssh/id_ed25519_work

    # Switch identity and clone through the profile's SSH alias
    gh-switch use work
    gh-switch clone https://github.com/acme/widget work
""",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    sub = parser.add_subparsers(dest="command", metavar="<command>")

    p = sub.add_parser("init", help="Initialize gh-switch and add your first account")
    _add_profile_options(p)

    p = sub.add_parser("add", help="Add a new GitHub account profile")
    _add_profile_options(p)

    sub.add_parser("list", aliases=["ls"], help="List all configured profiles")

    p = sub.add_parser("use", help="Switch to a specific profile")
    p.add_argument("profile", nargs="?", help="Profile name (prompted if omitted)")

    sub.add_parser("current", help="Show the currently active account")

    p = sub.add_parser("clone", help="Clone a repository using a specific account")
    p.add_argument("url", help="Repository URL")
    p.add_argument("profile", nargs="?", help="Profile name (default: active profile)")
    p.add_argument("dest", nargs="?", help="Destination directory")

    p = sub.add_parser("verify", help="Test SSH connection to GitHub for one or all profiles")
    p.add_argument("profile", nargs="?", help="Profile name (default: all)")

    p = sub.add_parser("remove", aliases=["rm"], help="Remove a profile")
    p.add_argument("profile", nargs="?", help="Profile name (prompted if omitted)")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    p = sub.add_parser("config", help="Show or edit configuration")
    p.add_argument("-e", "--edit", action="store_true", help="Open the config file in an editor")

    return parser


ALIASES = {"ls": "list", "rm": "remove"}


def main(
    argv: Optional[list[str]] = None,
    system: Optional[SystemCollaborator] = None,
    paths: Optional[SwitchPaths] = None,
) -> int:
    """Main entry point for the gh-switch CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    paths = paths or SwitchPaths.from_env()
    setup_logging(verbose=args.verbose, log_file=paths.log_file)

    switcher = IdentitySwitcher(paths, system or LocalSystem())
    command = COMMANDS[ALIASES.get(args.command, args.command)]

    try:
        return command(switcher, args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except EOFError:
        print("\nError: input ended before all required values were given", file=sys.stderr)
        return 1
    except ValidationError as e:
        logger.debug(f"Validation failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        if e.hint:
            print(f"Hint: {e.hint}", file=sys.stderr)
        return 1
    except (GhSwitchError, OSError) as e:
        logger.debug(f"{args.command} failed: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
