# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from azure.cli.core import AzCommandsLoader
from azext_aksengine.constants import VERSION


class AksEngineCommandsLoader(AzCommandsLoader):
    def __init__(self, cli_ctx=None):
        super(AksEngineCommandsLoader, self).__init__(cli_ctx=cli_ctx)

    def load_command_table(self, args):
        from azext_aksengine.engine._help import load_aksengine_help
        from azext_aksengine.engine.command_map import load_aksengine_commands

        load_aksengine_help()
        load_aksengine_commands(self, args)

        return self.command_table

    def load_arguments(self, command):
        from azext_aksengine.engine.params import load_aksengine_arguments

        load_aksengine_arguments(self, command)


COMMAND_LOADER_CLS = AksEngineCommandsLoader

__version__ = VERSION
