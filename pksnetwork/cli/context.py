"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

CLI context for PKSNetwork.

Provides shared context object and decorators for CLI commands.
"""

import click


class CLIContext:
    """Context object for CLI commands."""

    def __init__(self):
        self.config = None
        self.config_path = None
        self.token = None
        self.verbose = False


pass_context = click.make_pass_decorator(CLIContext, ensure=True)
