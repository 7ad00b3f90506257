"""Stand-alone pipeline validator with a fixed self-check suite."""

from __future__ import annotations

from typing import Optional, Sequence

DANGEROUS = ("rm", "format", "mkfs", "dd")
MAX_ARGS = 6
MAX_CMD_LEN = 256

TEST_CASES = (
    ("6 Arguments Test", "echo arg1 arg2 arg3 arg4 arg5 arg6"),
    ("7 Arguments Test", "echo arg1 arg2 arg3 arg4 arg5 arg6 arg7"),
    ("Empty Command Test", ""),
    ("Space Error Test", "echo  arg1   arg2"),
    ("Space and Args Error", "echo  arg1   arg2 arg3 arg4 arg5 arg6 arg7"),
    ("Space and Dangerous", "rm  -rf  /"),
    ("Simple Pipe Test", "echo hello | grep h"),
    ("Multi Pipe Test", "echo hello | grep h | wc -l"),
    ("Pipe with Space Error", "echo  hello | grep h"),
    ("Pipe with Space Error (Second Command)", "echo hello |  grep h"),
    ("Pipe with Args Error", "echo arg1 arg2 arg3 arg4 arg5 arg6 arg7 | grep h"),
    ("Pipe with Args Error (Second Command)", "echo hello | grep arg1 arg2 arg3 arg4 arg5 arg6 arg7"),
    ("Pipe with Dangerous Command", "echo hello | rm -rf /"),
    ("Pipe with Similar to Dangerous", "echo hello | rmdir /tmp"),
    ("Tee Basic Test", "echo hello | tee file.txt"),
    ("Tee with Multiple Files", "echo hello | tee file1.txt file2.txt file3.txt"),
    ("Tee with Too Many Files", "echo hello | tee f1.txt f2.txt f3.txt f4.txt f5.txt f6.txt f7.txt"),
    ("Tee with Space Error", "echo hello | tee  file.txt"),
    ("Complex Tee Pipeline", "echo hello | grep h | tee file.txt | wc -l"),
    ("Tee with Dangerous Filename", "echo hello | tee /root/system.txt"),
    ("Empty Pipe Test", "echo hello | | grep h"),
    ("Multiple Pipes with Spaces", "echo hello |  grep h  |   wc -l"),
    ("Complex Error Combination", "rm  -rf / | tee  file.txt | grep  pattern arg1 arg2 arg3 arg4 arg5 arg6"),
)


class ValidationError(ValueError):
    """Raised when a command fails validation; the message is ready to print."""


def is_dangerous_command(cmd: str) -> bool:
    return cmd in DANGEROUS


def is_similar_to_dangerous(cmd: str) -> bool:
    return any(word in cmd for word in DANGEROUS)


def has_space_error(cmd: str) -> bool:
    return "  " in cmd


def validate_command(cmd: str) -> Optional[str]:
    """Validate one command; return a warning text or None, raise on error."""
    if not cmd:
        raise ValidationError("ERROR: Empty command")
    if has_space_error(cmd):
        raise ValidationError("ERROR: Multiple spaces detected between arguments")
    tokens = [token for token in cmd[: MAX_CMD_LEN - 1].split(" ") if token]
    if not tokens:
        raise ValidationError("ERROR: Empty command")
    name = tokens[0]
    if is_dangerous_command(name):
        raise ValidationError(f"ERROR: Command '{name}' is blocked for safety reasons")
    if len(tokens) > MAX_ARGS + 1:
        raise ValidationError(f"ERROR: Too many arguments (max {MAX_ARGS} allowed)")
    if is_similar_to_dangerous(name):
        return f"WARNING: Command '{name}' is similar to a dangerous command"
    return None


def split_pipeline(text: str) -> list[str]:
    """Split on '|' (runs of bars count as one) and trim spaces from each part."""
    return [part.strip(" ") for part in text.split("|") if part]


def run_test(name: str, cmd: str) -> list[str]:
    """Validate a pipeline and return the report lines."""
    lines = ["", f"=== Test: {name} ===", f"Command: {cmd}", "-" * 40]
    commands = split_pipeline(cmd)
    if not commands:
        lines.append("ERROR: No valid commands found")
        return lines
    for number, command in enumerate(commands, start=1):
        lines.append(f"Validating command {number}: '{command}'")
        if not command:
            lines.append("ERROR: Empty command in pipeline")
            return lines
        try:
            warning = validate_command(command)
        except ValidationError as error:
            lines.append(str(error))
            return lines
        if warning is not None:
            lines.append(warning)
    lines.append("All commands validated successfully")
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    for name, cmd in TEST_CASES:
        print("\n".join(run_test(name, cmd)))
    return 0