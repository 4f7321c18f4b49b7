"""Allow ``python -m gitnav`` (used by fzf for the preview pane)."""

from gitnav.cli import main

main()
