# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

pytest_plugins = ["tests.integration.fixtures.database"]
