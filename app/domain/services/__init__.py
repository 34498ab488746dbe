# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from .data_processor import DataProcessorService

__all__ = ["DataProcessorService"]
