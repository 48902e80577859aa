"""
Advisory detection of destructive shell commands.

The verdict only decorates a bash permission request so the UI can show a
warning. It never approves or rejects anything by itself.
"""

import re

# Wipe the machine or the home directory wherever they appear
CATASTROPHIC_FRAGMENTS = [
    "rm -rf /",
    "rm -rf ~",
    ":(){ :|:& };:",
    "chmod -R 777 /",
    "> /dev/sda",
    "mv / ",
]

# Commands that destroy disks or filesystems
DESTRUCTIVE_PREFIXES = [
    "dd if=/dev/zero of=/dev/",
    "mkfs.",
    "shred ",
]

# Lose work but are used routinely
RISKY_FRAGMENTS = [
    "rm -rf",
    "git push --force",
    "git reset --hard",
    "dd if=/dev/",
    "dd of=/dev/",
    "chown -R",
]

# Downloaded scripts piped straight into a shell
REMOTE_SCRIPT = re.compile(r"\b(curl|wget)\b[^|]*\|\s*(sudo\s+)?(ba|z)?sh\b")


def is_dangerous_bash_command(command: str) -> tuple[bool, str]:
    """
    Check if a bash command is potentially dangerous.

    Checks run from most to least severe; the first hit names the warning.

    Args:
        command: The bash command to check

    Returns:
        Tuple of (is_dangerous, warning_message); the message is empty when safe
    """
    cmd = " ".join(command.split())

    hit = next((f for f in CATASTROPHIC_FRAGMENTS if f in cmd), None)
    if hit:
        return True, f"WARNING: This command contains '{hit}' which is EXTREMELY DANGEROUS"

    hit = next((p for p in DESTRUCTIVE_PREFIXES if cmd.startswith(p)), None)
    if hit:
        return True, f"WARNING: Commands starting with '{hit}' can destroy your system"

    if REMOTE_SCRIPT.search(cmd):
        return True, "WARNING: This command runs a downloaded script without review"

    hit = next((f for f in RISKY_FRAGMENTS if f in cmd), None)
    if hit:
        return True, f"WARNING: This command contains '{hit}' which can be destructive"

    return False, ""
