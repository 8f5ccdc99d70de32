"""Commands handed back to the calling shell.

sessionizer cannot change its parent's working directory, so it prints a
single ``<#Execute#>`` line on stdout; the shell hook from ``init`` runs it.
"""

from __future__ import annotations

import shlex

EXECUTE_MARKER = "<#Execute#>"
SHELLS = ("posix", "powershell")

POSIX_HOOK = """\
sessionizer() {
    local out
    out="$(command sessionizer "$@")" || return
    case "$out" in
        '<#Execute#>'*) eval "${out#'<#Execute#>'}" ;;
        ?*) printf '%s\\n' "$out" ;;
    esac
}
"""

POWERSHELL_HOOK = """\
function sessionizer {
    $out = & sessionizer.exe @args | Out-String
    $out = $out.Trim()
    if ($out.StartsWith('<#Execute#>')) {
        Invoke-Expression $out.Substring('<#Execute#>'.Length)
    } elseif ($out) {
        Write-Output $out
    }
}
"""


def quote_path(directory: str, shell: str = "posix") -> str:
    if shell == "powershell":
        return "'" + directory.replace("'", "''") + "'"
    return shlex.quote(directory)


def cd_command(directory: str, shell: str = "posix") -> str:
    return f"{EXECUTE_MARKER}cd {quote_path(directory, shell)}"


def new_tab_command(directory: str, shell: str = "posix") -> str:
    """Open ``directory`` in a new Windows Terminal tab."""
    return f"{EXECUTE_MARKER}wt -w 0 nt -d {quote_path(directory, shell)}"


def init_script(shell: str = "posix") -> str:
    return POWERSHELL_HOOK if shell == "powershell" else POSIX_HOOK


__all__ = [
    "EXECUTE_MARKER",
    "SHELLS",
    "cd_command",
    "init_script",
    "new_tab_command",
    "quote_path",
]
