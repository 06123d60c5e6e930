# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from .assembler import TemplateAssembler, escape_single_line
from .custom_script import get_base64_custom_script_from_str
from .extensions import ExtensionResolver
from .kubeconfig import generate_kubeconfig
from .models import ClusterProperties

__all__ = [
    "ClusterProperties",
    "ExtensionResolver",
    "TemplateAssembler",
    "escape_single_line",
    "generate_kubeconfig",
    "get_base64_custom_script_from_str",
]
