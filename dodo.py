from doit.action import CmdAction

# Directories holding fnplot sources
SOURCE_DIRS = "src tests scripts dodo.py"


def task_format():
    """Sort imports and format fnplot sources with ruff."""

    def router(check=False):
        if check:
            return (
                f"ruff check --select I {SOURCE_DIRS} && "
                f"ruff format --check {SOURCE_DIRS}"
            )
        return f"ruff check --select I --fix {SOURCE_DIRS} && ruff format {SOURCE_DIRS}"

    return {
        "actions": [CmdAction(router)],
        "params": [
            {
                "name": "check",
                "long": "check",
                "default": False,
                "type": bool,
                "help": "Report formatting problems without changing files",
            },
        ],
        "verbosity": 2,
    }


def task_test():
    """Run the test suite with pytest."""

    def router(keyword=""):
        if keyword:
            return f"pytest -q -k '{keyword}'"
        return "pytest -q"

    return {
        "actions": [CmdAction(router)],
        "params": [
            {
                "name": "keyword",
                "short": "k",
                "default": "",
                "type": str,
            },
        ],
        "verbosity": 2,
    }
