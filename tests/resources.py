import shlex
import subprocess
import sys
import textwrap

PYTHON = sys.executable


def python_arguments(code: str, *extra: str) -> str:
    """
    Build an argument string running the given code with the current Python.
    """
    parts = ["-c", textwrap.dedent(code).strip()] + list(extra)

    if sys.platform == "win32":
        return subprocess.list2cmdline(parts)

    return " ".join(shlex.quote(part) for part in parts)


ECHO_ARGUMENTS = """
import sys
print(" ".join(sys.argv[1:]))
"""

WRITE_BOTH_STREAMS = """
import sys
sys.stdout.write("A\\n")
sys.stdout.flush()
sys.stderr.write("B\\n")
sys.stderr.flush()
"""

SLEEP = """
import sys, time
time.sleep(float(sys.argv[1]))
"""

EXIT_WITH = """
import sys
sys.stderr.write("something went wrong\\n")
sys.exit(int(sys.argv[1]))
"""

NUMBERED_LINES = """
import sys
count = int(sys.argv[1])
for i in range(count):
    print("out-%d" % i)
    sys.stderr.write("err-%d\\n" % i)
"""

PRINT_ENV = """
import os, sys
print(os.environ.get(sys.argv[1], "<unset>"))
"""

PRINT_CWD = """
import os
print(os.getcwd())
"""

ECHO_STDIN = """
import sys
data = sys.stdin.read()
sys.stdout.write(data.upper())
"""
