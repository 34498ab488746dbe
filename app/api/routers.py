# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter

data_processors_router = APIRouter(prefix="/data-processors")
