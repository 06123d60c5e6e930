# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
Load CLI commands
"""
from azure.cli.core.commands import CliCommandType

template_ops = CliCommandType(operations_tmpl="azext_aksengine.engine.commands_template#{}")


def load_aksengine_commands(self, _):
    """
    Load CLI commands
    """
    with self.command_group(
        "aks-engine template",
        command_type=template_ops,
        is_preview=True,
    ) as cmd_group:
        cmd_group.command("render", "render_template")
        cmd_group.command("kubeconfig", "show_kubeconfig")
        cmd_group.command("extensions", "resolve_extensions")
        cmd_group.command("custom-script", "package_custom_script")
