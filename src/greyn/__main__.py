"""Entry point for 'python -m greyn' command.

This module allows the Greyn CLI to be invoked using
'python -m greyn' or 'python -m greyn serve'.
"""

from greyn.cli import main

if __name__ == "__main__":
    main()
