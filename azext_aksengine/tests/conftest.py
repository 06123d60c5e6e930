# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import pytest
import responses


@pytest.fixture
def mocked_responses():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def mocked_cmd(mocker):
    class Stub:
        pass

    config_values = {}

    def _getint(section, option, fallback=None):
        return config_values.get((section, option), fallback)

    cmd = Stub()
    cmd.cli_ctx = Stub()
    cmd.cli_ctx.config = mocker.Mock()
    cmd.cli_ctx.config.getint.side_effect = _getint
    cmd.config_values = config_values
    yield cmd
