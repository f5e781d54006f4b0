"""Starter .gitreport.toml template."""

DEFAULT_TOML = """\
# gitreport configuration
version = "1.0"

[git]
# binary_path = "/usr/bin/git"   # default: first git on PATH
# timeout_after = 30             # seconds; unset = no deadline
normalize_encoding = false
locale = "en_US.UTF-8"

[status]
untracked_files = "all"          # no | normal | all
ignored = "no"                   # traditional | no | matching
ignore_submodules = "all"        # none | untracked | dirty | all

[output]
format = "terminal"              # terminal | json
show_summary = true
"""
