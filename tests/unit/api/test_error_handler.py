# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

import pytest
from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from pydantic import BaseModel

from api.error_handler import custom_exception_handler, extract_constraint_name


@pytest.mark.parametrize(
    "error_msg,expected",
    [
        ("UNIQUE constraint failed: data_processor.slug", "data_processor.slug"),
        ("UNIQUE constraint failed: output_file.id", "output_file.id"),
        (
            "UNIQUE constraint failed: processor_parameter.data_processor_id, processor_parameter.name",
            "processor_parameter.data_processor_id, processor_parameter.name",
        ),
        ("CHECK constraint failed: ck_data_processor_description_length", "ck_data_processor_description_length"),
        ("NOT NULL constraint failed: data_processor.command", "data_processor.command"),
        ("FOREIGN KEY constraint failed", None),
        ("database is locked", None),
    ],
)
def test_extract_constraint_name(error_msg, expected):
    assert extract_constraint_name(error_msg) == expected


class _ParameterBody(BaseModel):
    name: str
    default_value: int


@pytest.fixture
def client():
    app = FastAPI()
    app.add_exception_handler(RequestValidationError, custom_exception_handler)

    @app.post("/parameters")
    def create_parameter(body: list[_ParameterBody]) -> dict:
        return {"count": len(body)}

    return TestClient(app, raise_server_exceptions=False)


def test_validation_errors_are_reported_by_field_path(client):
    response = client.post("/parameters", json=[{"name": "epochs", "default_value": 10}, {"default_value": "x"}])

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    detail = response.json()["detail"]
    assert "Field '1.name' is required." in detail
    assert "Field '1.default_value':" in detail
    assert "body" not in detail
