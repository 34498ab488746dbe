# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from . import data_processors

__all__ = ["data_processors"]
