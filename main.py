#!/usr/bin/env python3
"""
clamwrap entry point
"""
from clamwrap.cli import cli

if __name__ == '__main__':
    cli()
