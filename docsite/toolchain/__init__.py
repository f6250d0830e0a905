"""Toolchain layer: virtualenv provisioning, tool lookup and installation.

- `provisioner`: create the venv and install the requirements manifest.
- `locator`: ranked executable lookup and on-demand release installs.
- `download`: transports, archive extraction and binary placement.
- `fs_utils`: whitelisted directory removal used by ``clean``.
- `process`: subprocess runner shared by the workflows.
- `venv`: platform-specific venv paths.
"""
