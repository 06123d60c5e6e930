# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
CLI parameter definitions.
"""

from azure.cli.core.commands.parameters import get_three_state_flag


def load_aksengine_arguments(self, _):
    """
    Load CLI Args for Knack parser
    """

    with self.argument_context("aks-engine template") as context:
        context.argument(
            "cluster_spec_file",
            options_list=["--cluster-spec", "-f"],
            help="Path to the cluster api model, json or yaml. Either the full model or its properties.",
        )
        context.argument(
            "no_progress",
            options_list=["--no-progress"],
            arg_type=get_three_state_flag(),
            help="Disable visual representation of work.",
        )

    with self.argument_context("aks-engine template render") as context:
        context.argument(
            "template_name",
            options_list=["--name", "-n"],
            help="Name of the packaged template asset to render, e.g. kubernetesvnet.t.",
        )
        context.argument(
            "profile_index",
            options_list=["--profile-index"],
            type=int,
            help="Zero-based index of the agent pool rendered as the template profile. "
            "When omitted the master profile is used.",
        )
        context.argument(
            "single_line",
            options_list=["--single-line"],
            arg_type=get_three_state_flag(),
            help="Escape the result for embedding as a json string literal.",
        )

    with self.argument_context("aks-engine template kubeconfig") as context:
        context.argument(
            "location",
            options_list=["--location", "-l"],
            help="Azure region of the cluster. Used for the api server fqdn and the AAD environment.",
        )

    with self.argument_context("aks-engine template custom-script") as context:
        context.argument(
            "script_file",
            options_list=["--file"],
            help="Path to the script to gzip and base64 encode.",
        )
