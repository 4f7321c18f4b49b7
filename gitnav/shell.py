"""Shell integration — ``gn`` wrappers that cd into the selected repo."""

from __future__ import annotations

from typing import Optional

_POSIX = """\
# gitnav shell integration for {shell}
# Add this to your ~/.{shell}rc:
#   eval "$(gitnav init {shell})"

gn() {{
  local result
  result=$(gitnav "$@")

  if [[ -n "$result" ]] && [[ -d "$result" ]]; then
    cd "$result" || return 1

    # Optional: show a quick listing after cd
    if command -v eza &> /dev/null; then
      eza -l
    elif command -v ls &> /dev/null; then
      ls -la
    fi
  fi
}}
"""

_FISH = """\
# gitnav shell integration for fish
# Add this to your ~/.config/fish/config.fish:
#   gitnav init fish | source

function gn
  set result (gitnav $argv)

  if test -n "$result" -a -d "$result"
    cd "$result"; or return 1

    # Optional: show a quick listing after cd
    if command -v eza &> /dev/null
      eza -l
    else if command -v ls &> /dev/null
      ls -la
    end
  end
end
"""

_NU = """\
# gitnav shell integration for nushell
# Add this to your nushell config (typically ~/.config/nushell/config.nu):
#   gitnav init nu | save --force ~/.cache/gitnav/init.nu
#   source ~/.cache/gitnav/init.nu

def --env gn [...args] {
  let result = (gitnav ...$args | str trim)

  if ($result != "") and ($result | path exists) {
    cd $result

    # Optional: show a quick listing after cd
    if (which eza | length) > 0 {
      eza -l
    } else if (which ls | length) > 0 {
      ls
    }
  }
}
"""

SUPPORTED_SHELLS = ("zsh", "bash", "fish", "nu", "nushell")


def generate_init_script(shell: str) -> Optional[str]:
    """Init script for shell, or None if unsupported."""
    shell = shell.lower()
    if shell in ("zsh", "bash"):
        return _POSIX.format(shell=shell)
    if shell == "fish":
        return _FISH
    if shell in ("nu", "nushell"):
        return _NU
    return None
