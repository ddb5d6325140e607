"""Starter .svnscope.toml template."""

DEFAULT_TOML = """\
# svnscope configuration
version = "1.0"

[svn]
# executable = "svn"         # svn.exe on Windows
locale = "en_US.UTF-8"
timeout = 0                  # seconds per svn invocation, 0 = no timeout
log_limit = 100

[proxy]
enabled = false
# host = "proxy.example.com"
# port = 3128
# username = ""
# password is best supplied via SVNSCOPE_PROXY_PASSWORD
# bypass_for_local = true

[ssl]
verify = true                # false trusts unknown-ca, hostname-mismatch, expired, not-yet-valid

[logging]
level = "warning"            # debug | info | warning | error
format = "console"           # console | json
"""
