"""Documentation-site toolchain package.

This package drives the lifecycle of an MkDocs documentation site: it
provisions an isolated virtual environment from ``requirements.txt``, builds
and serves the site, removes generated artefacts, and lints the Markdown
sources with an on-demand installed ``autocorrect`` binary.

Package Structure
-----------------
- `cli.py`: Command dispatcher, logging setup and console-script entrypoint.
- `workflows.py`: The ``build``, ``run``, ``clean`` and ``lint`` sequences.
- `toolchain/`: Virtualenv provisioning, executable lookup, release
  downloads, safe removal and subprocess execution.
- `config.py`: Fixed constants and the immutable ``SiteConfig``.
- `exceptions.py`: The application error taxonomy.
- `console.py`: Rich-based terminal output.

Examples
--------
>>> from docsite.cli import main
>>> # main(["build"]) provisions .venv/ and writes site/
"""

__version__ = "0.1.0"
